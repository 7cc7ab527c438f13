import importlib

from stocktake.models.inventory import Inventory, InventoryEntry
from stocktake.models.product import Product
from stocktake.models.quantity_history import QuantityHistory


def import_all_models() -> None:
    for module_name in (
        "stocktake.models.inventory",
        "stocktake.models.product",
        "stocktake.models.quantity_history",
    ):
        importlib.import_module(module_name)


__all__ = [
    "Inventory",
    "InventoryEntry",
    "Product",
    "QuantityHistory",
    "import_all_models",
]
