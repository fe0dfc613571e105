from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from schemas.stock import StockCountCreate, StockCountRead, StockCreated, StockList
from services.flat_store import FlatStockStore, get_flat_store

router = APIRouter()


@router.post("", response_model=StockCreated)
async def create_stock_count(
    payload: StockCountCreate,
    store: FlatStockStore = Depends(get_flat_store),
):
    new_id = await store.record(payload)
    return StockCreated(id=new_id)


@router.get("", response_model=StockList)
async def list_stock_counts(
    day: Optional[date] = Query(None, alias="date", description="Only counts taken on this day (YYYY-MM-DD)"),
    store: FlatStockStore = Depends(get_flat_store),
):
    """Newest 200 counts, or every count taken on `date`."""
    rows = await store.list_counts(day)
    return StockList(rows=[StockCountRead.model_validate(r) for r in rows])
