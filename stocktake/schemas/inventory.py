import datetime
from typing import List, Literal, Optional

from pydantic import Field, field_validator, model_validator

from stocktake.schemas.common import CamelModel, strip_optional, strip_required
from stocktake.schemas.product import ProductSummary

EntryAction = Literal["add", "replace"]


class InventoryCreate(CamelModel):
    name: str
    store_name: Optional[str] = None
    date: datetime.date
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        return strip_required(v)

    @field_validator("store_name", "description")
    @classmethod
    def _strip_nullable(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None


class InventoryUpdate(CamelModel):
    """Fields an inventory edit may change. Entries go through the entry endpoints."""

    name: Optional[str] = None
    store_name: Optional[str] = None
    date: Optional[datetime.date] = None
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _strip_optional(cls, v: Optional[str]) -> Optional[str]:
        return strip_optional(v)

    @model_validator(mode="after")
    def _reject_nulls(self):
        for field_name in ("name", "date"):
            if field_name in self.model_fields_set and getattr(self, field_name) is None:
                raise ValueError(f"{field_name} cannot be null")
        return self


class InventoryEntryCreate(CamelModel):
    product_id: int
    quantity: float
    notes: Optional[str] = None


class InventoryEntryUpdate(CamelModel):
    quantity: float
    notes: Optional[str] = None
    action: EntryAction = "add"


class QuickAddRequest(CamelModel):
    boxes: float = 0
    units: float = 0
    action: EntryAction = "add"


class InventoryEntryRead(CamelModel):
    product_id: int
    quantity: float
    notes: Optional[str] = None
    product: Optional[ProductSummary] = None


class InventorySummary(CamelModel):
    id: int
    name: str
    store_name: Optional[str] = None
    date: datetime.date
    description: Optional[str] = None
    created_at: datetime.datetime
    product_count: int = 0


class InventoryRead(CamelModel):
    id: int
    name: str
    store_name: Optional[str] = None
    date: datetime.date
    description: Optional[str] = None
    created_at: datetime.datetime
    products: List[InventoryEntryRead] = Field(default_factory=list)
