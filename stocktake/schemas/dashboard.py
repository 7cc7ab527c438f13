from typing import List, Optional

from pydantic import Field

from stocktake.schemas.common import CamelModel
from stocktake.schemas.inventory import InventorySummary
from stocktake.schemas.product import ProductSummary


class CategoryTotal(CamelModel):
    category: str
    total_quantity: float
    unit: Optional[str] = None
    products: List[ProductSummary] = Field(default_factory=list)


class StoreTotal(CamelModel):
    store_name: Optional[str] = None
    total_quantity: float
    product_count: int


class StoreInventories(CamelModel):
    store_name: Optional[str] = None
    inventories: List[InventorySummary] = Field(default_factory=list)
