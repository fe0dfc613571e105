from typing import List

from fastapi import APIRouter, Depends

from schemas.items import ItemRead, ItemsSeeded, ItemsSeedRequest
from services.normalized_store import NormalizedStockStore, get_normalized_store

router = APIRouter()


@router.get("", response_model=List[ItemRead])
async def list_items(store: NormalizedStockStore = Depends(get_normalized_store)):
    items = await store.list_items()
    return [ItemRead(**i.to_schema) for i in items]


@router.post("/seed", response_model=ItemsSeeded)
async def seed_items(
    payload: ItemsSeedRequest,
    store: NormalizedStockStore = Depends(get_normalized_store),
):
    """Upsert the catalog by plu. `inserted` counts every element processed."""
    processed = await store.seed_items(payload.items)
    return ItemsSeeded(inserted=processed)
