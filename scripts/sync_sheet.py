import argparse
import sys
from pathlib import Path

# Ensure repo root is on sys.path when running this script directly.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from openpyxl.utils.exceptions import InvalidFileException

from pharma_sheet.core.constants import (
    KIND_BLISTER_DATE,
    KIND_BRAND,
    KIND_HOUSE,
    KIND_MEDICATION,
)
from pharma_sheet.core.errors import SyncError
from pharma_sheet.core.logging import setup_logging
from pharma_sheet.database import SessionLocal, init_db
from pharma_sheet.sync import load_workbook_rows, reconcile
from pharma_sheet.sync.reconciler import ensure_warehouse


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Sync a warehouse's medicine spreadsheet into the database."
    )
    parser.add_argument("--warehouse", required=True, help="Warehouse ID the sheet belongs to.")
    parser.add_argument("--path", required=True, help="Path to .xlsx workbook.")
    parser.add_argument("--dry-run", action="store_true", help="Classify rows without saving.")
    parser.add_argument(
        "--prune",
        action="store_true",
        default=None,
        help="Delete houses of this warehouse that are no longer in the sheet.",
    )
    parser.add_argument(
        "--create-warehouse",
        action="store_true",
        help="Create the warehouse first if it does not exist yet.",
    )
    parser.add_argument("--warehouse-name", help="Name for a warehouse created by --create-warehouse.")
    return parser.parse_args(argv)


def main(argv=None):
    setup_logging()
    args = parse_args(argv)
    init_db()

    db = SessionLocal()
    try:
        rows = load_workbook_rows(args.path)
        if args.create_warehouse:
            ensure_warehouse(db, args.warehouse, create=True, name=args.warehouse_name)
            # A dry run rolls the new warehouse back together with the pass.
            if not args.dry_run:
                db.commit()
        metadata = reconcile(
            db,
            args.warehouse,
            rows,
            dry_run=args.dry_run,
            prune_missing=args.prune,
        )
    except (OSError, ValueError, InvalidFileException, SyncError) as exc:
        raise SystemExit(f"Sync failed: {exc}") from exc
    finally:
        db.close()

    print(f"{metadata.title} ({metadata.synced_date})")
    for kind, counts in (
        (KIND_MEDICATION, metadata.medication),
        (KIND_HOUSE, metadata.house),
        (KIND_BRAND, metadata.brand),
        (KIND_BLISTER_DATE, metadata.blister_date),
    ):
        print(
            f"{kind}: {counts.total_medicine} total, "
            f"{counts.total_new_medicine} new, "
            f"{counts.total_updated_medicine} updated, "
            f"{counts.total_skipped_medicine} skipped "
            f"({counts.total_invalid_medicine} invalid), "
            f"{counts.total_deleted_medicine} deleted"
        )

    if args.dry_run:
        print("Dry run complete, no changes committed.")
    else:
        print("Sync complete.")


if __name__ == "__main__":
    main()
