"""
Configuration helpers for the memory map backend.

Routers/services read paths and limits from the Settings object instead of
fetching os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os

ROOT_DIR = Path(__file__).resolve().parents[2]


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    public_base_url: str
    data_file: str
    uploads_dir: str
    database_url: str
    admin_path: str
    max_upload_bytes: int
    max_upload_files: int
    log_level: str


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _path(value: str | None, default: Path) -> str:
        value = (value or "").strip()
        return str(Path(value).expanduser().resolve()) if value else str(default)

    admin_path = (os.getenv("ADMIN_PATH") or "/notre-secret-admin").strip()
    if not admin_path.startswith("/"):
        admin_path = "/" + admin_path

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        public_base_url=os.getenv("PUBLIC_BASE_URL", "http://localhost:8000").rstrip("/"),
        data_file=_path(os.getenv("DATA_FILE"), ROOT_DIR / "data" / "places.json"),
        uploads_dir=_path(os.getenv("UPLOADS_DIR"), ROOT_DIR / "uploads"),
        database_url=(os.getenv("DATABASE_URL") or "").strip(),
        admin_path=admin_path.rstrip("/") or "/notre-secret-admin",
        max_upload_bytes=_int(os.getenv("MAX_UPLOAD_BYTES", "10485760"), 10 * 1024 * 1024),
        max_upload_files=_int(os.getenv("MAX_UPLOAD_FILES", "10"), 10),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )
