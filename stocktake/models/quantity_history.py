from sqlalchemy import Column, Date, Float, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from stocktake.database.base import Base


class QuantityHistory(Base):
    __tablename__ = "product_quantity_history"

    id = Column(Integer, primary_key=True)
    product_id = Column(
        Integer,
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
    )

    store_name = Column(String)
    date = Column(Date)
    quantity = Column(Float, nullable=False, default=0)

    product = relationship("Product", back_populates="quantity_history")

    __table_args__ = (
        Index("idx_quantity_history_product", "product_id"),
    )


__all__ = ["QuantityHistory"]
