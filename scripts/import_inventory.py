#!/usr/bin/env python3
"""
Run an inventory import against catalogs stored as JSON.

Catalogs are either a combined backup ({version, inventory, locations,
sales}) or separate inventory/locations lists.

Usage:
    python scripts/import_inventory.py stock.csv --backup backup.json --location loc-1
    python scripts/import_inventory.py stock.xlsx --inventory inv.json --locations locs.json --location loc-1 --zero
    python scripts/import_inventory.py stock.csv --locations locs.json --preview
    python scripts/import_inventory.py stock.csv --backup backup.json --location loc-1 --write out.json
"""

import argparse
import json
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pathlib import Path

import structlog

from config import configure_logging, get_settings
from exceptions import AppError
from models import Location, Product
from parsers import DataKind, detect_data_kind, read_import_file
from services import InventoryService, get_export_service

logger = structlog.get_logger(__name__)


def load_json(path: str):
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def load_catalogs(args) -> tuple[list[Product], list[Location]]:
    """Products and locations from --backup or --inventory/--locations."""
    products_data: list = []
    locations_data: list = []

    if args.backup:
        backup = load_json(args.backup)
        if detect_data_kind(backup) != DataKind.COMBINED:
            raise SystemExit(f"Error: {args.backup} is not a combined backup")
        products_data = backup["inventory"]
        locations_data = backup["locations"]

    if args.inventory:
        data = load_json(args.inventory)
        if data and detect_data_kind(data) != DataKind.INVENTORY:
            raise SystemExit(f"Error: {args.inventory} does not contain inventory records")
        products_data = data

    if args.locations:
        data = load_json(args.locations)
        if data and detect_data_kind(data) != DataKind.LOCATIONS:
            raise SystemExit(f"Error: {args.locations} does not contain locations")
        locations_data = data

    products = [Product.model_validate(p) for p in products_data]
    locations = [Location.model_validate(loc) for loc in locations_data]
    return products, locations


def print_logs(logs) -> None:
    for log in logs:
        print(f"  [{log.type.value.upper():7}] {log.message}")


def main():
    parser = argparse.ArgumentParser(
        description="Import an inventory file into a JSON catalog",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("file", help="CSV/TSV/TXT or .xlsx file to import")
    parser.add_argument("--backup", help="Combined backup JSON (inventory + locations)")
    parser.add_argument("--inventory", help="Inventory JSON list")
    parser.add_argument("--locations", help="Locations JSON list")
    parser.add_argument(
        "--location",
        default=None,
        help="Target location id (manual location in --preview mode)"
    )
    parser.add_argument(
        "--zero",
        action="store_true",
        help="Zero stock at the target location that is missing from the file"
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Only parse and show the rows, do not reconcile"
    )
    parser.add_argument(
        "--write",
        metavar="PATH",
        help="Write the resulting catalog as JSON"
    )
    args = parser.parse_args()

    configure_logging(get_settings())

    try:
        text = read_import_file(Path(args.file))
    except AppError as e:
        print(f"Error: {e.message} ({e.details.get('original_error', '')})")
        sys.exit(1)

    products, locations = load_catalogs(args)
    service = InventoryService(products=products, locations=locations)

    print("=" * 60)
    print(f"IMPORT {args.file}")
    print("=" * 60)

    if args.preview:
        preview = service.preview_import(
            text,
            manual_location_id=args.location or get_settings().manual_location_sentinel,
        )
        if not preview.ok:
            print(f"Error: {preview.error}")
            sys.exit(1)
        for row in preview.preview:
            print(f"  {row.name:40} {row.size.label:12} {row.location_name or row.location_id:20} {row.quantity}")
        print(f"\n{len(preview.full_data)} rows parsed, {len(preview.warnings)} warnings")
        print_logs(preview.warnings)
        return

    result = service.import_from_csv(text, args.location, zero_non_existing=args.zero)
    print_logs(result.logs)
    print()
    print(f"Imported: {result.imported_count}")
    print(f"New:      {result.new_items_count}")
    print(f"Updated:  {result.updated_items_count}")
    print(f"Zeroed:   {result.zeroed_items_count}")
    print(f"Skipped:  {result.skipped_count}")

    if args.write:
        records = get_export_service().to_json(service.get_all())
        with open(args.write, "w", encoding="utf-8") as f:
            json.dump(records, f, ensure_ascii=False, indent=2)
        logger.info("catalog_written", path=args.write, count=len(records))

    sys.exit(1 if result.has_errors else 0)


if __name__ == "__main__":
    main()
