import logging
from datetime import date
from typing import List, Optional

from fastapi import Depends
from sqlalchemy import insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from db.database import get_async_session
from db.stock_count import StockCount
from schemas.stock import StockCountCreate
from services.stock_store import LIST_LIMIT, StockStore, day_bounds

logger = logging.getLogger(__name__)


class FlatStockStore(StockStore):
    """Observations in the single `stock_counts` table."""

    mode = "flat"

    async def record(self, payload: StockCountCreate) -> int:
        values = {
            "item_name": payload.item_name,
            "quantity": payload.quantity,
            "location": payload.location,
        }
        # leave counted_at to the server default unless the caller sent one
        if payload.counted_at is not None:
            values["counted_at"] = payload.counted_at

        try:
            result = await self.session.execute(insert(StockCount.__table__).values(**values))
            new_id = int(result.inserted_primary_key[0])
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.debug("recorded stock count id=%s item=%r location=%r", new_id, payload.item_name, payload.location)
        return new_id

    async def list_counts(self, day: Optional[date] = None) -> List[StockCount]:
        stmt = select(StockCount)
        if day is None:
            stmt = stmt.order_by(StockCount.counted_at.desc(), StockCount.id.desc()).limit(LIST_LIMIT)
        else:
            start, end = day_bounds(day)
            stmt = (
                stmt.where(StockCount.counted_at >= start, StockCount.counted_at < end)
                .order_by(StockCount.counted_at.desc(), StockCount.item_name.asc())
            )
        res = await self.session.execute(stmt)
        return list(res.scalars().all())


def get_flat_store(session: AsyncSession = Depends(get_async_session)) -> FlatStockStore:
    return FlatStockStore(session)
