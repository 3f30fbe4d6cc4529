#!/usr/bin/env python3
"""
Register a place directly in the configured store (JSON file or DATABASE_URL).

Usage:
  python scripts/add_place.py --name "Tour Eiffel" --address "Paris" --lat 48.8584 --lng 2.2945 \
      [--description "..."] [--date "2024-02-14"] [--order 0]
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from api.core.config import get_settings
from api.repositories import build_storage
from api.services.place_service import PlaceService


def main() -> None:
    ap = argparse.ArgumentParser(description="Add a place to the memory map")
    ap.add_argument("--name", required=True)
    ap.add_argument("--address", required=True)
    ap.add_argument("--lat", type=float, required=True, help="Latitude")
    ap.add_argument("--lng", type=float, required=True, help="Longitude")
    ap.add_argument("--description", default="")
    ap.add_argument("--date", default="", help="Free-form visit date")
    ap.add_argument("--order", type=int, default=0, help="sort_order (lower first)")
    args = ap.parse_args()

    settings = get_settings()
    svc = PlaceService(build_storage(settings), settings.uploads_dir)
    place = svc.create_place(
        {
            "name": args.name.strip(),
            "address": args.address.strip(),
            "latitude": args.lat,
            "longitude": args.lng,
            "description": args.description,
            "date_visited": args.date,
            "sort_order": args.order,
        }
    )
    print("OK: place created")
    print(f"  ID: {place['id']}")
    print(f"  Name: {place['name']}")
    print(f"  Coordinates: {place['latitude']}, {place['longitude']}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
