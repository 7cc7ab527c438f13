import argparse
import sys
from pathlib import Path

# Ensure repo root is on sys.path when running this script directly.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from openpyxl.utils.exceptions import InvalidFileException
from sqlalchemy.exc import SQLAlchemyError

from stocktake.config import get_settings
from stocktake.core.logging import setup_logging
from stocktake.database import create_db_engine, create_session_factory, init_db
from stocktake.services.import_service import import_product_workbook


def parse_args():
    parser = argparse.ArgumentParser(
        description="Import the product catalogue from an Excel workbook."
    )
    parser.add_argument("--path", required=True, help="Path to .xlsx workbook.")
    parser.add_argument("--dry-run", action="store_true", help="Validate without saving.")
    return parser.parse_args()


def main():
    settings = get_settings()
    setup_logging(settings)
    args = parse_args()

    engine = create_db_engine(settings.DATABASE_URL)
    init_db(engine)
    db = create_session_factory(engine)()
    try:
        counts = import_product_workbook(db, args.path, dry_run=args.dry_run)
    except (OSError, ValueError, SQLAlchemyError, InvalidFileException) as exc:
        raise SystemExit(f"Import failed: {exc}") from exc
    finally:
        db.close()
        engine.dispose()

    print(
        f"products: {counts['inserted']} inserted, "
        f"{counts['updated']} updated, {counts['skipped']} skipped"
    )
    if args.dry_run:
        print("Dry run complete, no changes committed.")
    else:
        print("Import complete.")


if __name__ == "__main__":
    main()
