"""Keep ``Product.current_quantity`` in step with inventory entries.

Every mutation validates its input, dereferences the inventory, entry and
product it touches, and only then writes. The entry change, the product
increment and the quantity history land in one transaction.

The product total is only ever changed with a single ``UPDATE ... SET
current_quantity = current_quantity + :delta``, never read-modify-write.
"""

import logging
import math
from datetime import datetime, timezone

from sqlalchemy import update
from sqlalchemy.orm import Session

from stocktake.core.constants import ENTRY_ACTIONS, NOTES_MAX_LENGTH
from stocktake.core.dates import normalize_date, same_day
from stocktake.core.errors import NotFoundError, ValidationError
from stocktake.core.units import convert_quick_add, describe_quick_add
from stocktake.database.session import commit_or_raise
from stocktake.models.inventory import Inventory, InventoryEntry
from stocktake.models.product import Product
from stocktake.models.quantity_history import QuantityHistory
from stocktake.services.catalog_service import get_product_or_404
from stocktake.services.inventory_service import find_entry, get_inventory_or_404

logger = logging.getLogger(__name__)


def validate_quantity(value, field="quantity") -> float:
    if value is None:
        raise ValidationError(f"{field} is required")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{field} must be a number")
    try:
        number = float(value)
    except OverflowError:
        raise ValidationError(f"{field} must be a finite number") from None
    if not math.isfinite(number):
        raise ValidationError(f"{field} must be a finite number")
    if number < 0:
        raise ValidationError("Quantity cannot be negative")
    return number


def validate_notes(notes, max_length=NOTES_MAX_LENGTH):
    """None keeps the stored note; any string (empty included) replaces it."""
    if notes is None:
        return None
    if not isinstance(notes, str):
        raise ValidationError("Notes must be a string")
    if len(notes) > max_length:
        raise ValidationError(f"Notes cannot exceed {max_length} characters")
    return notes


def increment_current_quantity(db: Session, product_id: int, delta: float) -> None:
    if not delta:
        return
    db.execute(
        update(Product)
        .where(Product.id == product_id)
        .values(
            current_quantity=Product.current_quantity + delta,
            last_updated=datetime.now(timezone.utc),
        )
        .execution_options(synchronize_session=False)
    )


def record_history(product: Product, store_name, on_date, quantity_delta: float) -> QuantityHistory:
    for entry in product.quantity_history:
        if entry.store_name == store_name and same_day(entry.date, on_date):
            entry.quantity = (entry.quantity or 0) + quantity_delta
            return entry
    entry = QuantityHistory(
        store_name=store_name,
        date=normalize_date(on_date),
        quantity=quantity_delta,
    )
    product.quantity_history.append(entry)
    return entry


def add_or_increment(
    db: Session,
    inventory_id: int,
    product_id: int,
    delta_quantity,
    notes=None,
) -> Inventory:
    delta = validate_quantity(delta_quantity)
    notes = validate_notes(notes)
    inventory = get_inventory_or_404(db, inventory_id)
    product = get_product_or_404(db, product_id)

    entry = find_entry(inventory, product.id)
    if entry is not None:
        entry.quantity = (entry.quantity or 0) + delta
        if notes is not None:
            entry.notes = notes
    else:
        inventory.entries.append(
            InventoryEntry(product_id=product.id, quantity=delta, notes=notes)
        )

    increment_current_quantity(db, product.id, delta)
    record_history(product, inventory.store_name, inventory.date, delta)
    commit_or_raise(db, "add product to inventory")
    db.refresh(product)
    logger.info(
        "Added %s of product %s to inventory %s (current quantity %s)",
        delta,
        product.id,
        inventory.id,
        product.current_quantity,
        extra={"inventory_id": inventory.id, "product_id": product.id, "delta": delta},
    )
    return inventory


def replace(
    db: Session,
    inventory_id: int,
    product_id: int,
    new_quantity,
    notes=None,
) -> Inventory:
    quantity = validate_quantity(new_quantity)
    notes = validate_notes(notes)
    inventory = get_inventory_or_404(db, inventory_id)
    entry = find_entry(inventory, product_id)
    if entry is None:
        raise NotFoundError("Product not found in inventory")
    product = get_product_or_404(db, product_id)

    difference = quantity - (entry.quantity or 0)
    entry.quantity = quantity
    if notes is not None:
        entry.notes = notes

    increment_current_quantity(db, product.id, difference)
    commit_or_raise(db, "update product in inventory")
    db.refresh(product)
    logger.info(
        "Replaced quantity of product %s in inventory %s with %s (delta %s)",
        product.id,
        inventory.id,
        quantity,
        difference,
        extra={"inventory_id": inventory.id, "product_id": product.id, "delta": difference},
    )
    return inventory


def remove(db: Session, inventory_id: int, product_id: int) -> Inventory:
    inventory = get_inventory_or_404(db, inventory_id)
    entry = find_entry(inventory, product_id)
    if entry is None:
        raise NotFoundError("Product not found in inventory")

    # current_quantity keeps the removed entry's contribution; no compensating decrement.
    removed_quantity = entry.quantity
    inventory.entries.remove(entry)
    commit_or_raise(db, "remove product from inventory")
    logger.warning(
        "Removed product %s from inventory %s; current quantity still includes %s",
        product_id,
        inventory.id,
        removed_quantity,
        extra={"inventory_id": inventory.id, "product_id": product_id},
    )
    return inventory


def quick_add(
    db: Session,
    inventory_id: int,
    product_id: int,
    boxes=0,
    units=0,
    action="add",
) -> Inventory:
    if action not in ENTRY_ACTIONS:
        raise ValidationError("action must be 'add' or 'replace'")
    get_inventory_or_404(db, inventory_id)
    product = get_product_or_404(db, product_id)

    quantity = convert_quick_add(product, boxes, units)
    if action == "replace":
        notes = describe_quick_add(product, boxes, units, verb="Updated")
        return replace(db, inventory_id, product_id, quantity, notes=notes)
    notes = describe_quick_add(product, boxes, units, verb="Added")
    return add_or_increment(db, inventory_id, product_id, quantity, notes=notes)


def apply_entry_update(db: Session, inventory_id: int, product_id: int, quantity, notes=None, action="add"):
    """PUT semantics for an existing entry: ``replace`` sets it, ``add`` increments it."""
    if action == "replace":
        return replace(db, inventory_id, product_id, quantity, notes=notes)
    if action == "add":
        validate_quantity(quantity)
        validate_notes(notes)
        inventory = get_inventory_or_404(db, inventory_id)
        if find_entry(inventory, product_id) is None:
            raise NotFoundError("Product not found in inventory")
        return add_or_increment(db, inventory_id, product_id, quantity, notes=notes)
    raise ValidationError("action must be 'add' or 'replace'")
