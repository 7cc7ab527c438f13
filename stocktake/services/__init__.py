from stocktake.services.aggregation_service import category_totals, store_names, store_totals
from stocktake.services.import_service import import_product_workbook
from stocktake.services.reconciliation_service import (
    add_or_increment,
    quick_add,
    record_history,
    remove,
    replace,
)

__all__ = [
    "add_or_increment",
    "category_totals",
    "import_product_workbook",
    "quick_add",
    "record_history",
    "remove",
    "replace",
    "store_names",
    "store_totals",
]
