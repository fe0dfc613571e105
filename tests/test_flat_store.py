"""Tests for the flat stock_counts store."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from core.errors import UnsupportedOperation
from schemas.stock import StockCountCreate
from services.flat_store import FlatStockStore
from services.stock_store import LIST_LIMIT


def _count(item_name="Lager", quantity=1, location="bar", counted_at=None) -> StockCountCreate:
    return StockCountCreate(item_name=item_name, quantity=quantity, location=location, counted_at=counted_at)


async def test_record_returns_fresh_ids_and_row_is_listed(session):
    store = FlatStockStore(session)

    first = await store.record(_count("Lager", "12.5", "bar"))
    second = await store.record(_count("Stout", 3, "cooler"))

    assert first != second
    rows = await store.list_counts()
    by_id = {r.id: r for r in rows}
    assert by_id[first].item_name == "Lager"
    assert by_id[first].quantity == Decimal("12.50")
    assert by_id[first].location == "bar"
    assert by_id[second].item_name == "Stout"


async def test_counted_at_defaults_to_insertion_time(session):
    store = FlatStockStore(session)

    await store.record(_count())

    (row,) = await store.list_counts()
    assert isinstance(row.counted_at, datetime)


async def test_unfiltered_list_is_newest_first(session):
    store = FlatStockStore(session)
    await store.record(_count("Old", counted_at="2025-01-01 08:00:00"))
    await store.record(_count("Newest", counted_at="2025-03-01 08:00:00"))
    await store.record(_count("Middle", counted_at="2025-02-01 08:00:00"))

    rows = await store.list_counts()

    assert [r.item_name for r in rows] == ["Newest", "Middle", "Old"]


async def test_unfiltered_list_is_capped(session):
    store = FlatStockStore(session)
    for i in range(LIST_LIMIT + 5):
        await store.record(_count(f"Item {i}"))

    rows = await store.list_counts()

    assert len(rows) == LIST_LIMIT


async def test_date_filter_keeps_only_that_day(session):
    store = FlatStockStore(session)
    await store.record(_count("Before", counted_at="2025-11-04 23:59:59"))
    await store.record(_count("Midnight", counted_at="2025-11-05"))
    await store.record(_count("Morning", counted_at="2025-11-05 09:30:00"))
    await store.record(_count("Apple", counted_at="2025-11-05 09:30:00"))
    await store.record(_count("After", counted_at="2025-11-06 00:00:00"))

    rows = await store.list_counts(date(2025, 11, 5))

    # counted_at DESC, then item_name ASC
    assert [r.item_name for r in rows] == ["Apple", "Morning", "Midnight"]
    assert all(r.counted_at.date() == date(2025, 11, 5) for r in rows)


async def test_date_filter_with_no_rows(session):
    store = FlatStockStore(session)
    await store.record(_count(counted_at="2025-11-05 10:00:00"))

    assert await store.list_counts(date(2024, 1, 1)) == []


async def test_summary_not_available(session):
    with pytest.raises(UnsupportedOperation):
        await FlatStockStore(session).summarize()
