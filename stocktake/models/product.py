from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, Index, Integer, String
from sqlalchemy.orm import relationship

from stocktake.core.constants import DEFAULT_CATEGORY, DEFAULT_LOCATION, DEFAULT_UNIT
from stocktake.database.base import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)

    unit = Column(String(20), nullable=False, default=DEFAULT_UNIT)
    quantity_per_box = Column(Float)
    box_unit = Column(String(20), nullable=False, default=DEFAULT_UNIT)
    packet_quantity = Column(Float)
    packet_unit = Column(String(20), nullable=False, default=DEFAULT_UNIT)

    # Running total in base units across every inventory entry.
    current_quantity = Column(Float, nullable=False, default=0)

    category = Column(String, nullable=False, default=DEFAULT_CATEGORY)
    location = Column(String, nullable=False, default=DEFAULT_LOCATION)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
    last_updated = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    quantity_history = relationship(
        "QuantityHistory",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="QuantityHistory.id",
    )

    __table_args__ = (
        Index("idx_products_name", "name"),
        Index("idx_products_category", "category"),
    )


__all__ = ["Product"]
