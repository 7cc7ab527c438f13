from datetime import datetime, timezone

from sqlalchemy import Column, Date, DateTime, Float, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from stocktake.database.base import Base


class Inventory(Base):
    __tablename__ = "inventories"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    store_name = Column(String)
    date = Column(Date, nullable=False)
    description = Column(Text)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    entries = relationship(
        "InventoryEntry",
        back_populates="inventory",
        cascade="all, delete-orphan",
        order_by="InventoryEntry.id",
    )

    __table_args__ = (
        Index("idx_inventories_store_date", "store_name", "date"),
    )


class InventoryEntry(Base):
    __tablename__ = "inventory_entries"

    id = Column(Integer, primary_key=True)
    inventory_id = Column(
        Integer,
        ForeignKey("inventories.id", ondelete="CASCADE"),
        nullable=False,
    )
    # No foreign key: deleting a product leaves its entries orphaned.
    product_id = Column(Integer, nullable=False)

    quantity = Column(Float, nullable=False, default=0)
    notes = Column(Text)

    inventory = relationship("Inventory", back_populates="entries")

    __table_args__ = (
        UniqueConstraint("inventory_id", "product_id", name="uq_inventory_entries_product"),
        Index("idx_inventory_entries_product", "product_id"),
    )


__all__ = ["Inventory", "InventoryEntry"]
