from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from .database import Base


class Item(Base):
    __tablename__ = "items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # NULL plu rows never collide with each other under the unique index
    plu = Column(String(64), nullable=True, unique=True)
    name = Column(String(255), nullable=False, index=True)

    counts = relationship(
        "Count",
        back_populates="item",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def to_schema(self):
        return {"id": self.id, "plu": self.plu, "name": self.name}
