from sqlalchemy import Column, DateTime, Integer, Numeric, String
from sqlalchemy.sql import func

from .database import Base


class StockCount(Base):
    """Flat-mode observation: every field lives on the one row."""
    __tablename__ = "stock_counts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    item_name = Column(String(255), nullable=False)
    quantity = Column(Numeric(10, 2), nullable=False, server_default="0")
    location = Column(String(100), nullable=False)
    counted_at = Column(DateTime, nullable=False, server_default=func.now(), index=True)

