"""Shared interface for the flat and normalized stock stores.

Both shapes expose the same capabilities (`record`, `list_counts`,
`summarize`) over an AsyncSession borrowed from the pool for one request.
"""
from abc import ABC, abstractmethod
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import UnsupportedOperation

# newest-first page size for unfiltered listings
LIST_LIMIT = 200


def day_bounds(day: date) -> Tuple[datetime, datetime]:
    """[start, end) of a calendar day, so the comparison can use the index."""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def as_decimal(value: Any) -> Decimal:
    # SUM over no rows, or a driver handing back float/int
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


class StockStore(ABC):
    mode: str = ""

    def __init__(self, session: AsyncSession):
        self.session = session

    @property
    def dialect_name(self) -> str:
        return self.session.get_bind().dialect.name

    @abstractmethod
    async def record(self, payload) -> Any:
        ...

    @abstractmethod
    async def list_counts(self, day: Optional[date] = None) -> List[Any]:
        ...

    async def summarize(self) -> List[dict]:
        raise UnsupportedOperation(f"summary is not available in {self.mode} mode")
