import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from stocktake.core.errors import NotFoundError
from stocktake.database.session import commit_or_raise
from stocktake.models.inventory import Inventory
from stocktake.schemas.inventory import (
    InventoryCreate,
    InventoryEntryRead,
    InventoryRead,
    InventorySummary,
    InventoryUpdate,
)
from stocktake.schemas.product import ProductSummary
from stocktake.services.catalog_service import load_products_by_id

logger = logging.getLogger(__name__)

UPDATABLE_INVENTORY_FIELDS = frozenset({"name", "store_name", "date", "description"})


def get_inventory_or_404(db: Session, inventory_id: int) -> Inventory:
    inventory = db.get(Inventory, inventory_id)
    if inventory is None:
        raise NotFoundError("Inventory not found")
    return inventory


def find_entry(inventory: Inventory, product_id: int):
    for entry in inventory.entries:
        if entry.product_id == product_id:
            return entry
    return None


def list_inventories(db: Session) -> list[Inventory]:
    inventories = (
        db.execute(select(Inventory).order_by(Inventory.date.desc(), Inventory.id.desc()))
        .scalars()
        .all()
    )
    return list(inventories)


def create_inventory(db: Session, payload: InventoryCreate) -> Inventory:
    inventory = Inventory(**payload.model_dump())
    db.add(inventory)
    commit_or_raise(db, "create inventory")
    db.refresh(inventory)
    logger.info("Created inventory %s (%s, %s)", inventory.id, inventory.store_name, inventory.date)
    return inventory


def update_inventory(db: Session, inventory_id: int, payload: InventoryUpdate) -> Inventory:
    inventory = get_inventory_or_404(db, inventory_id)
    for key, value in payload.model_dump(exclude_unset=True).items():
        if key in UPDATABLE_INVENTORY_FIELDS:
            setattr(inventory, key, value)
    commit_or_raise(db, "update inventory")
    db.refresh(inventory)
    return inventory


def delete_inventory(db: Session, inventory_id: int) -> None:
    inventory = get_inventory_or_404(db, inventory_id)
    db.delete(inventory)
    commit_or_raise(db, "delete inventory")
    logger.info("Deleted inventory %s; product quantities are not rolled back", inventory_id)


def build_inventory_reads(db: Session, inventories) -> list[InventoryRead]:
    """Serialize inventories with each entry's product attached (None when orphaned)."""
    inventories = list(inventories)
    products = load_products_by_id(
        db,
        (entry.product_id for inventory in inventories for entry in inventory.entries),
    )
    results = []
    for inventory in inventories:
        entries = []
        for entry in inventory.entries:
            product = products.get(entry.product_id)
            entries.append(
                InventoryEntryRead(
                    product_id=entry.product_id,
                    quantity=entry.quantity,
                    notes=entry.notes,
                    product=ProductSummary.model_validate(product) if product else None,
                )
            )
        results.append(
            InventoryRead(
                id=inventory.id,
                name=inventory.name,
                store_name=inventory.store_name,
                date=inventory.date,
                description=inventory.description,
                created_at=inventory.created_at,
                products=entries,
            )
        )
    return results


def build_inventory_read(db: Session, inventory: Inventory) -> InventoryRead:
    return build_inventory_reads(db, [inventory])[0]


def build_inventory_summary(inventory: Inventory) -> InventorySummary:
    return InventorySummary(
        id=inventory.id,
        name=inventory.name,
        store_name=inventory.store_name,
        date=inventory.date,
        description=inventory.description,
        created_at=inventory.created_at,
        product_count=len(inventory.entries),
    )
