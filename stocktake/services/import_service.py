import logging
import math
from pathlib import Path

from openpyxl import load_workbook
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from stocktake.core.constants import CONTENT_UNITS, DEFAULT_CATEGORY, DEFAULT_LOCATION, DEFAULT_UNIT
from stocktake.core.units import unit_metadata_problem
from stocktake.models.product import Product

logger = logging.getLogger(__name__)

HEADER_ALIASES = {
    "name": "name",
    "nome": "name",
    "product": "name",
    "unit": "unit",
    "unidade": "unit",
    "quantityperbox": "quantity_per_box",
    "quantidadeporcaixa": "quantity_per_box",
    "boxunit": "box_unit",
    "unidadecaixa": "box_unit",
    "packetquantity": "packet_quantity",
    "quantidadepacote": "packet_quantity",
    "packetunit": "packet_unit",
    "unidadepacote": "packet_unit",
    "currentquantity": "current_quantity",
    "quantidadeatual": "current_quantity",
    "category": "category",
    "categoria": "category",
    "location": "location",
    "localizacao": "location",
    "localização": "location",
}

UNIT_ALIASES = {
    "cx": "box",
    "caixa": "box",
    "box": "box",
    "kg": "kilogram",
    "kilograma": "kilogram",
    "kilogram": "kilogram",
    "l": "liter",
    "litro": "liter",
    "litre": "liter",
    "liter": "liter",
    "barril": "barrel",
    "barrel": "barrel",
    "pacote": "packet",
    "packet": "packet",
    "unidade": "unit",
    "unit": "unit",
    "piece": "unit",
}

CONTENT_UNIT_ALIASES = {
    key: value
    for key, value in UNIT_ALIASES.items()
    if value in CONTENT_UNITS
}


def _is_blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def normalize_header(value):
    if value is None:
        return ""
    value_text = str(value).strip().lower()
    if not value_text:
        return ""
    for char in (" ", "-", ".", "/"):
        value_text = value_text.replace(char, "_")
    value_text = "_".join(part for part in value_text.split("_") if part)
    alias = HEADER_ALIASES.get(value_text)
    if alias:
        return alias
    alias = HEADER_ALIASES.get(value_text.replace("_", ""))
    if alias:
        return alias
    return value_text


def normalize_unit(value, aliases=UNIT_ALIASES):
    if _is_blank(value):
        return DEFAULT_UNIT
    return aliases.get(str(value).strip().lower(), DEFAULT_UNIT)


def to_str(value, default=None):
    if _is_blank(value):
        return default
    return str(value).strip()


def to_float(value, field, default=None):
    if _is_blank(value):
        return default
    if isinstance(value, str):
        value = value.replace(",", "")
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        raise ValueError(f"{field} must be a number") from None
    if not math.isfinite(number):
        raise ValueError(f"{field} must be a finite number")
    return number


def load_sheet_rows(worksheet):
    rows_iter = worksheet.iter_rows(values_only=True)
    headers = next(rows_iter, None)
    if not headers:
        return [], set()
    header_keys = [normalize_header(header) for header in headers]
    indices = [(idx, key) for idx, key in enumerate(header_keys) if key]
    columns = {key for key in header_keys if key}

    rows = []
    for row in rows_iter:
        if row is None or all(_is_blank(value) for value in row):
            continue
        rows.append({key: row[idx] if idx < len(row) else None for idx, key in indices})
    return rows, columns


def build_product_values(row):
    name = to_str(row.get("name"))
    if not name:
        raise ValueError("name is required")
    unit = normalize_unit(row.get("unit"))
    quantity_per_box = to_float(row.get("quantity_per_box"), "quantity_per_box")
    packet_quantity = to_float(row.get("packet_quantity"), "packet_quantity")
    problem = unit_metadata_problem(unit, quantity_per_box, packet_quantity)
    if problem:
        raise ValueError(problem)
    current_quantity = to_float(row.get("current_quantity"), "current_quantity", default=0.0)
    if current_quantity < 0:
        raise ValueError("current_quantity cannot be negative")
    return {
        "name": name,
        "unit": unit,
        "quantity_per_box": quantity_per_box,
        "box_unit": normalize_unit(row.get("box_unit"), CONTENT_UNIT_ALIASES),
        "packet_quantity": packet_quantity,
        "packet_unit": normalize_unit(row.get("packet_unit"), CONTENT_UNIT_ALIASES),
        "current_quantity": current_quantity,
        "category": to_str(row.get("category"), DEFAULT_CATEGORY),
        "location": to_str(row.get("location"), DEFAULT_LOCATION),
    }


def upsert_product(db: Session, values) -> str:
    product = (
        db.execute(select(Product).where(Product.name == values["name"]))
        .scalars()
        .first()
    )
    if product:
        for key, value in values.items():
            setattr(product, key, value)
        return "updated"
    db.add(Product(**values))
    return "inserted"


def import_rows(db: Session, rows):
    counts = {"inserted": 0, "updated": 0, "skipped": 0}
    for row_number, row in enumerate(rows, start=2):
        try:
            values = build_product_values(row)
        except ValueError as exc:
            logger.warning("Skipping row %s: %s", row_number, exc)
            counts["skipped"] += 1
            continue
        action = upsert_product(db, values)
        # Rows later in the sheet can update products added earlier in it.
        db.flush()
        counts[action] += 1
    return counts


def import_product_workbook(db: Session, workbook_path, dry_run=False):
    """Upsert products by name from the first sheet of an ``.xlsx`` workbook."""
    workbook_path = Path(workbook_path)
    if not workbook_path.exists():
        raise FileNotFoundError(f"File not found: {workbook_path}")
    if workbook_path.suffix.lower() != ".xlsx":
        raise ValueError("Only .xlsx files are supported.")

    workbook = load_workbook(workbook_path, data_only=True)
    worksheet = workbook[workbook.sheetnames[0]]
    rows, columns = load_sheet_rows(worksheet)
    if "name" not in columns:
        raise ValueError("Product sheet missing columns: name")

    try:
        counts = import_rows(db, rows)
        if dry_run:
            db.rollback()
        else:
            db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info(
        "Imported %s: %s inserted, %s updated, %s skipped%s",
        workbook_path.name,
        counts["inserted"],
        counts["updated"],
        counts["skipped"],
        " (dry run)" if dry_run else "",
    )
    return counts
