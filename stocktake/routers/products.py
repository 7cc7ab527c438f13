from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from stocktake.core.units import display_unit, split_quantity
from stocktake.database.session import get_db
from stocktake.schemas.common import MessageResponse
from stocktake.schemas.product import ProductCreate, ProductRead, ProductUpdate, QuantityBreakdown
from stocktake.services import catalog_service
from stocktake.services.aggregation_service import filter_products, sort_products

router = APIRouter(prefix="/products", tags=["Products"])


@router.get("", response_model=List[ProductRead])
def list_products(
    q: Optional[str] = Query(None, description="Search name, category or location"),
    sort: Optional[str] = Query(None, description="name | category | location | quantity"),
    order: str = Query("asc", description="asc | desc"),
    db: Session = Depends(get_db),
):
    products = catalog_service.list_products(db)
    if q:
        products = filter_products(products, q)
    if sort:
        products = sort_products(products, sort, order)
    return products


@router.post("", response_model=ProductRead, status_code=201)
def create_product(payload: ProductCreate, db: Session = Depends(get_db)):
    return catalog_service.create_product(db, payload)


@router.get("/{product_id}", response_model=ProductRead)
def get_product(product_id: int, db: Session = Depends(get_db)):
    return catalog_service.get_product_or_404(db, product_id)


@router.get("/{product_id}/breakdown", response_model=QuantityBreakdown)
def quantity_breakdown(
    product_id: int,
    quantity: Optional[float] = Query(None, description="Defaults to the current quantity"),
    db: Session = Depends(get_db),
):
    product = catalog_service.get_product_or_404(db, product_id)
    if quantity is None:
        quantity = product.current_quantity
    boxes, units = split_quantity(product, quantity)
    return QuantityBreakdown(boxes=boxes, units=units, unit=display_unit(product))


@router.put("/{product_id}", response_model=ProductRead)
def update_product(product_id: int, payload: ProductUpdate, db: Session = Depends(get_db)):
    return catalog_service.update_product(db, product_id, payload)


@router.delete("/{product_id}", response_model=MessageResponse)
def delete_product(product_id: int, db: Session = Depends(get_db)):
    catalog_service.delete_product(db, product_id)
    return MessageResponse(message="Product deleted successfully")


__all__ = ["router"]
