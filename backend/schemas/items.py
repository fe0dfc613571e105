from datetime import datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from schemas.stock import Quantity, coerce_quantity, strip_required

CountLocation = Literal["bar", "cooler"]


class ItemSeed(BaseModel):
    plu: Optional[str] = None
    name: str

    @field_validator("plu", mode="before")
    @classmethod
    def _plu(cls, v):
        if v is None:
            return None
        if isinstance(v, bool) or not isinstance(v, (str, int)):
            raise ValueError("must be a string")
        v = str(v).strip()
        return v or None

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, v):
        return strip_required(v)


class ItemsSeedRequest(BaseModel):
    items: List[ItemSeed]


class ItemsSeeded(BaseModel):
    ok: Literal[True] = True
    inserted: int


class ItemRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    plu: Optional[str] = None
    name: str


class CountCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    item_id: int = Field(alias="itemId", gt=0)
    location: CountLocation
    qty: Decimal

    @field_validator("location", mode="before")
    @classmethod
    def _location(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("qty", mode="before")
    @classmethod
    def _qty(cls, v):
        return coerce_quantity(v)


class CountAccepted(BaseModel):
    ok: Literal[True] = True


class CountRead(BaseModel):
    id: int
    item_id: int
    name: str
    plu: Optional[str] = None
    location: CountLocation
    qty: Quantity
    counted_at: datetime


class CountList(BaseModel):
    ok: Literal[True] = True
    rows: List[CountRead]


class SummaryRow(BaseModel):
    id: int
    name: str
    plu: Optional[str] = None
    bar_qty: Quantity
    cooler_qty: Quantity
