import logging
from datetime import date
from typing import List, Optional, Sequence

from fastapi import Depends
from sqlalchemy import case, func, insert, select, update
from sqlalchemy.dialects.mysql import insert as mysql_insert
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import ConstraintViolation, ValidationError
from db.count import Count
from db.database import get_async_session
from db.item import Item
from schemas.items import CountCreate, ItemSeed
from services.stock_store import LIST_LIMIT, StockStore, as_decimal, day_bounds

logger = logging.getLogger(__name__)


class NormalizedStockStore(StockStore):
    """Counts in `counts`, keyed to the `items` catalog."""

    mode = "normalized"

    # -- item catalog ---------------------------------------------------

    def _upsert_item_stmt(self, item: ItemSeed):
        item_tbl = Item.__table__
        dialect = self.dialect_name
        if dialect == "mysql":
            stmt = mysql_insert(item_tbl).values(plu=item.plu, name=item.name)
            return stmt.on_duplicate_key_update(name=stmt.inserted.name)
        if dialect in ("postgresql", "sqlite"):
            insert_fn = pg_insert if dialect == "postgresql" else sqlite_insert
            stmt = insert_fn(item_tbl).values(plu=item.plu, name=item.name)
            return stmt.on_conflict_do_update(
                index_elements=[item_tbl.c.plu],
                set_={"name": stmt.excluded.name},
            )
        return None

    async def _upsert_item(self, item: ItemSeed) -> None:
        stmt = self._upsert_item_stmt(item)
        if stmt is not None:
            await self.session.execute(stmt)
            return
        # no native upsert for this dialect: look up then write
        existing = await self.session.scalar(select(Item.id).where(Item.plu == item.plu))
        if existing is None:
            await self.session.execute(insert(Item.__table__).values(plu=item.plu, name=item.name))
        else:
            await self.session.execute(update(Item.__table__).where(Item.id == existing).values(name=item.name))

    async def seed_items(self, items: Sequence[ItemSeed]) -> int:
        """Upsert every element by plu (plain insert when plu is null).

        Returns the number of elements processed. The batch commits once; a
        failing element rolls the whole batch back and is reported by index.
        """
        processed = 0
        index = 0
        try:
            for index, item in enumerate(items):
                if item.plu is None:
                    await self.session.execute(insert(Item.__table__).values(name=item.name))
                else:
                    await self._upsert_item(item)
                processed += 1
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise ConstraintViolation(f"items[{index}] rejected, batch rolled back: {e.orig}") from e
        except Exception:
            await self.session.rollback()
            logger.error("item seed failed at items[%d] after %d processed", index, processed)
            raise

        logger.info("seeded %d items", processed)
        return processed

    async def list_items(self) -> List[Item]:
        res = await self.session.execute(select(Item).order_by(Item.name.asc(), Item.id.asc()))
        return list(res.scalars().all())

    # -- counts ---------------------------------------------------------

    async def record(self, payload: CountCreate) -> None:
        exists = await self.session.scalar(select(Item.id).where(Item.id == payload.item_id))
        if exists is None:
            raise ValidationError(f"itemId: item {payload.item_id} does not exist")

        try:
            await self.session.execute(
                insert(Count.__table__).values(
                    item_id=payload.item_id,
                    location=payload.location,
                    qty=payload.qty,
                )
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

    async def list_counts(self, day: Optional[date] = None) -> List[dict]:
        stmt = select(
            Count.id,
            Count.item_id,
            Item.name,
            Item.plu,
            Count.location,
            Count.qty,
            Count.counted_at,
        ).join(Item, Count.item_id == Item.id)
        if day is None:
            stmt = stmt.order_by(Count.counted_at.desc(), Count.id.desc()).limit(LIST_LIMIT)
        else:
            start, end = day_bounds(day)
            stmt = (
                stmt.where(Count.counted_at >= start, Count.counted_at < end)
                .order_by(Count.counted_at.desc(), Item.name.asc())
            )
        res = await self.session.execute(stmt)
        return [
            {
                "id": r.id,
                "item_id": r.item_id,
                "name": r.name,
                "plu": r.plu,
                "location": r.location,
                "qty": as_decimal(r.qty),
                "counted_at": r.counted_at,
            }
            for r in res.all()
        ]

    async def summarize(self) -> List[dict]:
        """Per-item bar/cooler totals; items without counts report 0."""
        bar_qty = func.coalesce(func.sum(case((Count.location == "bar", Count.qty))), 0)
        cooler_qty = func.coalesce(func.sum(case((Count.location == "cooler", Count.qty))), 0)
        stmt = (
            select(
                Item.id,
                Item.name,
                Item.plu,
                bar_qty.label("bar_qty"),
                cooler_qty.label("cooler_qty"),
            )
            .outerjoin(Count, Count.item_id == Item.id)
            .group_by(Item.id, Item.name, Item.plu)
            .order_by(Item.name.asc(), Item.id.asc())
        )
        res = await self.session.execute(stmt)
        return [
            {
                "id": r.id,
                "name": r.name,
                "plu": r.plu,
                "bar_qty": as_decimal(r.bar_qty),
                "cooler_qty": as_decimal(r.cooler_qty),
            }
            for r in res.all()
        ]


def get_normalized_store(session: AsyncSession = Depends(get_async_session)) -> NormalizedStockStore:
    return NormalizedStockStore(session)
