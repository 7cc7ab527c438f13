import datetime
from typing import List, Literal, Optional

from pydantic import Field, field_validator, model_validator

from stocktake.core.units import unit_metadata_problem
from stocktake.schemas.common import (
    CamelModel,
    non_negative,
    positive,
    strip_optional,
    strip_required,
)

ProductUnit = Literal["box", "unit", "kilogram", "liter", "barrel", "packet"]
ContentUnit = Literal["unit", "kilogram", "liter"]

_NON_NULLABLE_FIELDS = (
    "name",
    "unit",
    "box_unit",
    "packet_unit",
    "current_quantity",
    "category",
    "location",
)


class ProductBase(CamelModel):
    name: str
    unit: ProductUnit
    quantity_per_box: Optional[float] = None
    box_unit: ContentUnit = "unit"
    packet_quantity: Optional[float] = None
    packet_unit: ContentUnit = "unit"
    category: str
    location: str


class ProductCreate(ProductBase):
    current_quantity: float = 0

    @field_validator("name", "category", "location")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        return strip_required(v)

    @field_validator("quantity_per_box", "packet_quantity")
    @classmethod
    def _positive(cls, v: Optional[float]) -> Optional[float]:
        return positive(v)

    @field_validator("current_quantity")
    @classmethod
    def _non_negative(cls, v: float) -> float:
        return non_negative(v)

    @model_validator(mode="after")
    def _validate_unit_metadata(self):
        problem = unit_metadata_problem(self.unit, self.quantity_per_box, self.packet_quantity)
        if problem:
            raise ValueError(problem)
        return self


class ProductUpdate(CamelModel):
    """Fields a catalog edit may change. Anything else in the body is ignored."""

    name: Optional[str] = None
    unit: Optional[ProductUnit] = None
    quantity_per_box: Optional[float] = None
    box_unit: Optional[ContentUnit] = None
    packet_quantity: Optional[float] = None
    packet_unit: Optional[ContentUnit] = None
    current_quantity: Optional[float] = None
    category: Optional[str] = None
    location: Optional[str] = None

    @field_validator("name", "category", "location")
    @classmethod
    def _strip_optional(cls, v: Optional[str]) -> Optional[str]:
        return strip_optional(v)

    @field_validator("quantity_per_box", "packet_quantity")
    @classmethod
    def _positive(cls, v: Optional[float]) -> Optional[float]:
        return positive(v)

    @field_validator("current_quantity")
    @classmethod
    def _non_negative(cls, v: Optional[float]) -> Optional[float]:
        return non_negative(v)

    @model_validator(mode="after")
    def _reject_nulls(self):
        for field_name in _NON_NULLABLE_FIELDS:
            if field_name in self.model_fields_set and getattr(self, field_name) is None:
                raise ValueError(f"{field_name} cannot be null")
        return self


class QuantityHistoryRead(CamelModel):
    store_name: Optional[str] = None
    date: Optional[datetime.date] = None
    quantity: float


class ProductSummary(ProductBase):
    id: int
    current_quantity: float


class ProductRead(ProductSummary):
    quantity_history: List[QuantityHistoryRead] = Field(default_factory=list)
    created_at: datetime.datetime
    updated_at: datetime.datetime
    last_updated: datetime.datetime


class QuantityBreakdown(CamelModel):
    boxes: int
    units: float
    unit: str
