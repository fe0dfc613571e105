from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Annotated, Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, PlainSerializer, field_validator

# DECIMAL(10,2)
MAX_QUANTITY = Decimal("99999999.99")
CENT = Decimal("0.01")

# DECIMAL(10,2) presentation on the wire: 12.1 -> "12.10"
Quantity = Annotated[
    Decimal,
    PlainSerializer(lambda d: f"{d.quantize(CENT, rounding=ROUND_HALF_UP):f}", return_type=str),
]


def coerce_quantity(v: Any) -> Decimal:
    if v is None:
        raise ValueError("field is required")
    if isinstance(v, bool):
        raise ValueError("must be a number")
    if isinstance(v, str):
        v = v.strip()
        if not v:
            raise ValueError("must be a number")
    try:
        d = Decimal(str(v))
    except (InvalidOperation, ValueError):
        raise ValueError("must be a number")
    if not d.is_finite():
        raise ValueError("must be a finite number")
    if d < 0:
        raise ValueError("must be >= 0")
    if d > MAX_QUANTITY:
        raise ValueError(f"must be <= {MAX_QUANTITY}")
    return d.quantize(CENT, rounding=ROUND_HALF_UP)


def strip_required(v: Any) -> str:
    if v is None:
        raise ValueError("field is required")
    if isinstance(v, bool) or not isinstance(v, (str, int, float, Decimal)):
        raise ValueError("must be a string")
    v = str(v).strip()
    if not v:
        raise ValueError("field is required")
    return v


def _naive_utc(dt: datetime) -> datetime:
    # columns are naive; an explicit offset is folded into UTC
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def parse_counted_at(v: Any) -> Optional[datetime]:
    """Accept `YYYY-MM-DD` or an ISO date-time (`T` or space separated)."""
    if v is None:
        return None
    if isinstance(v, datetime):
        return _naive_utc(v)
    if isinstance(v, date):
        return datetime.combine(v, datetime.min.time())
    if not isinstance(v, str):
        raise ValueError("must be a date or date-time string")
    v = v.strip()
    if not v:
        return None
    try:
        if len(v) == 10:
            return datetime.combine(date.fromisoformat(v), datetime.min.time())
        return _naive_utc(datetime.fromisoformat(v))
    except ValueError:
        raise ValueError("must look like YYYY-MM-DD or YYYY-MM-DD HH:MM:SS")


class StockCountCreate(BaseModel):
    item_name: str
    quantity: Decimal
    location: str
    counted_at: Optional[datetime] = None

    @field_validator("item_name", "location", mode="before")
    @classmethod
    def _strip_required(cls, v):
        return strip_required(v)

    @field_validator("quantity", mode="before")
    @classmethod
    def _quantity(cls, v):
        return coerce_quantity(v)

    @field_validator("counted_at", mode="before")
    @classmethod
    def _counted_at(cls, v):
        return parse_counted_at(v)


class StockCountRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    item_name: str
    quantity: Quantity
    location: str
    counted_at: datetime


class StockCreated(BaseModel):
    ok: Literal[True] = True
    id: int


class StockList(BaseModel):
    ok: Literal[True] = True
    rows: List[StockCountRead]


class Pong(BaseModel):
    pong: bool = True


class HealthStatus(BaseModel):
    ok: bool
    error: Optional[str] = None

