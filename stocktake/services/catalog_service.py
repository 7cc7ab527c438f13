import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from stocktake.core.errors import NotFoundError, ValidationError
from stocktake.core.units import unit_metadata_problem
from stocktake.database.session import commit_or_raise
from stocktake.models.product import Product
from stocktake.schemas.product import ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)

UPDATABLE_PRODUCT_FIELDS = frozenset(
    {
        "name",
        "unit",
        "quantity_per_box",
        "box_unit",
        "packet_quantity",
        "packet_unit",
        "current_quantity",
        "category",
        "location",
    }
)


def get_product_or_404(db: Session, product_id: int) -> Product:
    product = db.get(Product, product_id)
    if product is None:
        raise NotFoundError("Product not found")
    return product


def list_products(db: Session) -> list[Product]:
    products = (
        db.execute(select(Product).order_by(Product.created_at.desc(), Product.id.desc()))
        .scalars()
        .all()
    )
    return list(products)


def load_products_by_id(db: Session, product_ids) -> dict[int, Product]:
    ids = {product_id for product_id in product_ids if product_id is not None}
    if not ids:
        return {}
    products = db.execute(select(Product).where(Product.id.in_(ids))).scalars().all()
    return {product.id: product for product in products}


def validate_unit_metadata(values: dict) -> None:
    problem = unit_metadata_problem(
        values.get("unit"),
        values.get("quantity_per_box"),
        values.get("packet_quantity"),
    )
    if problem:
        raise ValidationError(problem)


def create_product(db: Session, payload: ProductCreate) -> Product:
    values = payload.model_dump()
    validate_unit_metadata(values)
    product = Product(**values)
    db.add(product)
    commit_or_raise(db, "create product")
    db.refresh(product)
    logger.info("Created product %s (%s)", product.id, product.name)
    return product


def update_product(db: Session, product_id: int, payload: ProductUpdate) -> Product:
    product = get_product_or_404(db, product_id)
    changes = {
        key: value
        for key, value in payload.model_dump(exclude_unset=True).items()
        if key in UPDATABLE_PRODUCT_FIELDS
    }
    merged = {
        "unit": product.unit,
        "quantity_per_box": product.quantity_per_box,
        "packet_quantity": product.packet_quantity,
    }
    merged.update(changes)
    validate_unit_metadata(merged)

    if "current_quantity" in changes and changes["current_quantity"] != product.current_quantity:
        logger.info(
            "Catalog edit overwrites currentQuantity of product %s: %s -> %s",
            product.id,
            product.current_quantity,
            changes["current_quantity"],
        )
    for key, value in changes.items():
        setattr(product, key, value)

    commit_or_raise(db, "update product")
    db.refresh(product)
    return product


def delete_product(db: Session, product_id: int) -> None:
    product = get_product_or_404(db, product_id)
    db.delete(product)
    commit_or_raise(db, "delete product")
    logger.info("Deleted product %s; inventory entries referencing it are left in place", product_id)
