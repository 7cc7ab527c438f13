import math
from typing import Optional

from stocktake.core.constants import BOX_UNIT, DEFAULT_UNIT, PACKET_UNIT
from stocktake.core.errors import ValidationError


def _as_number(value, field):
    if value is None or (isinstance(value, str) and not value.strip()):
        return 0.0
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f"{field} must be a number") from None
    if not math.isfinite(number):
        raise ValidationError(f"{field} must be a finite number")
    return number


def _is_positive(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0


def package_size(product) -> Optional[float]:
    """Base units held by one box or packet, or None for loose units."""
    if product.unit == BOX_UNIT:
        return product.quantity_per_box or 0
    if product.unit == PACKET_UNIT:
        return product.packet_quantity or 0
    return None


def display_unit(product) -> str:
    if product.unit == BOX_UNIT:
        return product.box_unit or DEFAULT_UNIT
    if product.unit == PACKET_UNIT:
        return product.packet_unit or DEFAULT_UNIT
    return product.unit


def unit_metadata_problem(unit, quantity_per_box, packet_quantity) -> Optional[str]:
    if unit == BOX_UNIT and not _is_positive(quantity_per_box):
        return 'Quantity per box is required when unit is "box"'
    if unit == PACKET_UNIT and not _is_positive(packet_quantity):
        return 'Packet quantity is required when unit is "packet"'
    return None


def convert_quick_add(product, boxes_or_packets, extra_units) -> float:
    boxes = _as_number(boxes_or_packets, "boxes")
    units = _as_number(extra_units, "units")
    size = package_size(product)
    if size is None:
        total = units
    else:
        total = boxes * size + units
    if total < 0:
        raise ValidationError("Quantity cannot be negative")
    return total


def split_quantity(product, quantity) -> tuple[int, float]:
    quantity = _as_number(quantity, "quantity")
    size = package_size(product)
    if not size:
        return 0, quantity
    boxes = math.floor(quantity / size)
    return boxes, quantity - boxes * size


def _format_number(value) -> str:
    return "{:g}".format(float(value))


def describe_quick_add(product, boxes_or_packets, extra_units, verb="Added") -> str:
    boxes = _as_number(boxes_or_packets, "boxes")
    units = _as_number(extra_units, "units")
    if product.unit == BOX_UNIT:
        return f"{verb} {_format_number(boxes)} boxes and {_format_number(units)} units"
    if product.unit == PACKET_UNIT:
        return f"{verb} {_format_number(boxes)} packets and {_format_number(units)} units"
    return f"{verb} {_format_number(units)} units"
