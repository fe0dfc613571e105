from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from schemas.items import CountAccepted, CountCreate, CountList, CountRead, SummaryRow
from services.normalized_store import NormalizedStockStore, get_normalized_store

router = APIRouter()


@router.post("/counts", response_model=CountAccepted)
async def create_count(
    payload: CountCreate,
    store: NormalizedStockStore = Depends(get_normalized_store),
):
    await store.record(payload)
    return CountAccepted()


@router.get("/counts", response_model=CountList)
async def list_counts(
    day: Optional[date] = Query(None, alias="date"),
    store: NormalizedStockStore = Depends(get_normalized_store),
):
    rows = await store.list_counts(day)
    return CountList(rows=[CountRead(**r) for r in rows])


@router.get("/summary", response_model=List[SummaryRow])
async def summary(store: NormalizedStockStore = Depends(get_normalized_store)):
    rows = await store.summarize()
    return [SummaryRow(**r) for r in rows]
