#!/usr/bin/env python3
"""
Upsert products from a CSV file or a Google spreadsheet, outside the API.

Usage:
    python scripts/import_products.py --file products.csv
    python scripts/import_products.py --sheet <spreadsheetId> [--range "Products!A1:Z"]
"""
import argparse
import os
import sys

# allow running from repo/scripts
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from zee_ordering.adapters.google_sheets import GoogleSheetsAdapter, SheetsConfigError, SheetsError
from zee_ordering.config import settings
from zee_ordering.db import SessionLocal, init_db
from zee_ordering.services.import_service import ImportService, ImportServiceException


def main(argv=None):
    parser = argparse.ArgumentParser(description="Import products into the catalog")
    src = parser.add_mutually_exclusive_group(required=True)
    src.add_argument("--file", help="CSV file with SKUCode and Remark columns")
    src.add_argument("--sheet", help="Google spreadsheet id")
    parser.add_argument("--range", default=None, help="A1 range for --sheet")
    parser.add_argument("--batch-size", type=int, default=None)
    args = parser.parse_args(argv)

    if args.batch_size:
        settings.IMPORT_BATCH_SIZE = args.batch_size

    init_db()
    db = SessionLocal()
    try:
        svc = ImportService(db, settings=settings)
        if args.file:
            with open(args.file, "rb") as fh:
                result = svc.import_csv(fh.read())
        else:
            cell_range = args.range or settings.GOOGLE_SHEETS_RANGE
            values = GoogleSheetsAdapter(settings).get_values(args.sheet, cell_range)
            result = svc.import_sheet_values(values)
    except (ImportServiceException, SheetsConfigError, SheetsError, OSError) as e:
        print(f"Import failed: {e}", file=sys.stderr)
        return 1
    finally:
        db.close()

    print(f"Imported {result.imported} rows, skipped {result.skipped}.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
