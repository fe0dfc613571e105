from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

COUNT_LOCATIONS = ("bar", "cooler")


class Count(Base):
    __tablename__ = "counts"
    __table_args__ = (
        CheckConstraint("location IN ('bar', 'cooler')", name="ck_counts_location"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    item_id = Column(Integer, ForeignKey("items.id", ondelete="CASCADE"), nullable=False, index=True)
    location = Column(String(16), nullable=False)  # 'bar' | 'cooler'
    qty = Column(Numeric(10, 2), nullable=False, server_default="0")
    counted_at = Column(DateTime, nullable=False, server_default=func.now(), index=True)

    item = relationship("Item", back_populates="counts")
