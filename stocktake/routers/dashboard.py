from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from stocktake.database.session import get_db
from stocktake.schemas.dashboard import CategoryTotal, StoreInventories, StoreTotal
from stocktake.services import catalog_service, inventory_service
from stocktake.services.aggregation_service import (
    category_totals,
    filter_inventories,
    group_inventories_by_store,
    sort_inventories,
    store_names,
    store_totals,
)

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/category-totals", response_model=List[CategoryTotal])
def category_totals_view(db: Session = Depends(get_db)):
    return category_totals(catalog_service.list_products(db))


@router.get("/store-totals", response_model=List[StoreTotal])
def store_totals_view(db: Session = Depends(get_db)):
    return store_totals(catalog_service.list_products(db))


@router.get("/stores", response_model=List[str])
def store_names_view(db: Session = Depends(get_db)):
    return store_names(inventory_service.list_inventories(db))


@router.get("/inventories", response_model=List[StoreInventories])
def inventories_by_store(
    q: Optional[str] = Query(None, description="Search inventory or store name"),
    store: Optional[str] = Query(None, description="Exact store name"),
    sort: str = Query("date", description="store | date | name"),
    order: str = Query("desc", description="asc | desc"),
    db: Session = Depends(get_db),
):
    inventories = filter_inventories(inventory_service.list_inventories(db), query=q, store=store)
    inventories = sort_inventories(inventories, sort, order)
    return [
        StoreInventories(
            store_name=group["store_name"],
            inventories=[
                inventory_service.build_inventory_summary(inventory)
                for inventory in group["inventories"]
            ],
        )
        for group in group_inventories_by_store(inventories)
    ]


__all__ = ["router"]
