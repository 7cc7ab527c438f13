import argparse
import sys
from datetime import date, timedelta
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from sqlalchemy import delete, select

from stocktake.config import get_settings
from stocktake.core.logging import setup_logging
from stocktake.database import create_db_engine, create_session_factory, init_db
from stocktake.models.inventory import Inventory, InventoryEntry
from stocktake.models.product import Product
from stocktake.models.quantity_history import QuantityHistory
from stocktake.services.reconciliation_service import add_or_increment


def parse_args():
    parser = argparse.ArgumentParser(description="Seed sample products and inventories.")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Clear existing data before seeding.",
    )
    return parser.parse_args()


def main():
    settings = get_settings()
    setup_logging(settings)
    args = parse_args()

    engine = create_db_engine(settings.DATABASE_URL)
    init_db(engine)

    db = create_session_factory(engine)()
    try:
        if args.reset:
            db.execute(delete(InventoryEntry))
            db.execute(delete(Inventory))
            db.execute(delete(QuantityHistory))
            db.execute(delete(Product))
            db.commit()

        has_product = db.execute(select(Product.id).limit(1)).first()
        if has_product:
            print("Seed skipped: products already exist.")
            return

        products = [
            Product(
                name="Mineral Water 500ml",
                unit="box",
                quantity_per_box=12,
                box_unit="unit",
                category="Drinks",
                location="Cold Room",
            ),
            Product(
                name="Coffee Capsules",
                unit="packet",
                packet_quantity=10,
                packet_unit="unit",
                category="Coffee",
                location="Shelf A",
            ),
            Product(
                name="Flour",
                unit="kilogram",
                category="Dry Goods",
                location="Storage",
            ),
            Product(
                name="Draft Beer",
                unit="barrel",
                category="Drinks",
                location="Cellar",
            ),
        ]
        inventories = [
            Inventory(
                name="Weekly count",
                store_name="Downtown",
                date=date.today() - timedelta(days=7),
            ),
            Inventory(
                name="Weekly count",
                store_name="Harbour",
                date=date.today(),
                description="First count after the delivery",
            ),
        ]
        db.add_all(products + inventories)
        db.commit()

        add_or_increment(db, inventories[0].id, products[0].id, 36, notes="Added 3 boxes and 0 units")
        add_or_increment(db, inventories[0].id, products[2].id, 12.5)
        add_or_increment(db, inventories[1].id, products[1].id, 45, notes="Added 4 packets and 5 units")
        add_or_increment(db, inventories[1].id, products[3].id, 2)
        print("Seed data created.")
    finally:
        db.close()
        engine.dispose()


if __name__ == "__main__":
    main()
