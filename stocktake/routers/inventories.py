from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from stocktake.database.session import get_db
from stocktake.schemas.common import MessageResponse
from stocktake.schemas.inventory import (
    InventoryCreate,
    InventoryEntryCreate,
    InventoryEntryUpdate,
    InventoryRead,
    InventoryUpdate,
    QuickAddRequest,
)
from stocktake.services import inventory_service, reconciliation_service
from stocktake.services.aggregation_service import filter_inventories, sort_inventories

router = APIRouter(prefix="/inventories", tags=["Inventories"])


@router.get("", response_model=List[InventoryRead])
def list_inventories(
    q: Optional[str] = Query(None, description="Search inventory or store name"),
    store: Optional[str] = Query(None, description="Exact store name"),
    sort: Optional[str] = Query(None, description="store | date | name"),
    order: str = Query("desc", description="asc | desc"),
    db: Session = Depends(get_db),
):
    inventories = inventory_service.list_inventories(db)
    if q or store:
        inventories = filter_inventories(inventories, query=q, store=store)
    if sort:
        inventories = sort_inventories(inventories, sort, order)
    return inventory_service.build_inventory_reads(db, inventories)


@router.post("", response_model=InventoryRead, status_code=201)
def create_inventory(payload: InventoryCreate, db: Session = Depends(get_db)):
    inventory = inventory_service.create_inventory(db, payload)
    return inventory_service.build_inventory_read(db, inventory)


@router.get("/{inventory_id}", response_model=InventoryRead)
def get_inventory(inventory_id: int, db: Session = Depends(get_db)):
    inventory = inventory_service.get_inventory_or_404(db, inventory_id)
    return inventory_service.build_inventory_read(db, inventory)


@router.put("/{inventory_id}", response_model=InventoryRead)
def update_inventory(inventory_id: int, payload: InventoryUpdate, db: Session = Depends(get_db)):
    inventory = inventory_service.update_inventory(db, inventory_id, payload)
    return inventory_service.build_inventory_read(db, inventory)


@router.delete("/{inventory_id}", response_model=MessageResponse)
def delete_inventory(inventory_id: int, db: Session = Depends(get_db)):
    inventory_service.delete_inventory(db, inventory_id)
    return MessageResponse(message="Inventory deleted successfully")


@router.post("/{inventory_id}/products", response_model=InventoryRead)
def add_product_to_inventory(
    inventory_id: int,
    payload: InventoryEntryCreate,
    db: Session = Depends(get_db),
):
    inventory = reconciliation_service.add_or_increment(
        db,
        inventory_id,
        payload.product_id,
        payload.quantity,
        notes=payload.notes,
    )
    return inventory_service.build_inventory_read(db, inventory)


@router.put("/{inventory_id}/products/{product_id}", response_model=InventoryRead)
def update_product_in_inventory(
    inventory_id: int,
    product_id: int,
    payload: InventoryEntryUpdate,
    db: Session = Depends(get_db),
):
    inventory = reconciliation_service.apply_entry_update(
        db,
        inventory_id,
        product_id,
        payload.quantity,
        notes=payload.notes,
        action=payload.action,
    )
    return inventory_service.build_inventory_read(db, inventory)


@router.post("/{inventory_id}/products/{product_id}/quick-add", response_model=InventoryRead)
def quick_add_product(
    inventory_id: int,
    product_id: int,
    payload: QuickAddRequest,
    db: Session = Depends(get_db),
):
    inventory = reconciliation_service.quick_add(
        db,
        inventory_id,
        product_id,
        boxes=payload.boxes,
        units=payload.units,
        action=payload.action,
    )
    return inventory_service.build_inventory_read(db, inventory)


@router.delete("/{inventory_id}/products/{product_id}", response_model=InventoryRead)
def remove_product_from_inventory(
    inventory_id: int,
    product_id: int,
    db: Session = Depends(get_db),
):
    inventory = reconciliation_service.remove(db, inventory_id, product_id)
    return inventory_service.build_inventory_read(db, inventory)


__all__ = ["router"]
