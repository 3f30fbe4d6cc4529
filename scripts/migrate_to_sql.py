"""One-off migration script: JSON document (places.json) -> SQL backend (DATABASE_URL)."""
from __future__ import annotations

import argparse
import json
from pathlib import Path
import sys

# make the api package importable when run directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from api.core.config import get_settings
from api.domain.places import store_defaults
from api.repositories.sql_storage import SQLStorage


def _load_json(path: Path) -> dict:
    if not path.exists():
        raise SystemExit(f"File not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise SystemExit(f"{path} does not hold a JSON object")
    return store_defaults(data)


def migrate(source: Path) -> dict:
    store = _load_json(source)
    place_ids = {p.get("id") for p in store["places"]}
    orphans = [p for p in store["photos"] if p.get("place_id") not in place_ids]
    if orphans:
        # the photos table has a foreign key on places.id
        store["photos"] = [p for p in store["photos"] if p.get("place_id") in place_ids]
    storage = SQLStorage()
    storage.initialize()
    storage.save(store)
    return {"places": len(store["places"]), "photos": len(store["photos"]), "skipped_photos": len(orphans)}


def main() -> None:
    settings = get_settings()
    ap = argparse.ArgumentParser(description="Copy the JSON store into the SQL database")
    ap.add_argument("--source", default=settings.data_file, help="JSON document (default: DATA_FILE)")
    args = ap.parse_args()
    if not settings.database_url:
        raise SystemExit("DATABASE_URL must be set")
    counts = migrate(Path(args.source))
    print("JSON data migrated to SQL successfully.")
    print(f"  Places: {counts['places']}")
    print(f"  Photos: {counts['photos']} (skipped orphans: {counts['skipped_photos']})")


if __name__ == "__main__":
    main()
