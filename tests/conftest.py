from __future__ import annotations

import sys
from pathlib import Path

import pytest

# make the api package importable when running the tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from api.core.config import Settings  # noqa: E402


@pytest.fixture()
def settings(tmp_path) -> Settings:
    """Settings pointing at a throwaway data file and uploads directory."""
    return Settings(
        app_env="dev",
        public_base_url="http://testserver",
        data_file=str(tmp_path / "data" / "places.json"),
        uploads_dir=str(tmp_path / "uploads"),
        database_url="",
        admin_path="/secret-admin",
        max_upload_bytes=1024,
        max_upload_files=3,
        log_level="WARNING",
    )
