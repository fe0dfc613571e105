import argparse
import asyncio
import json
import sys
from pathlib import Path

"""
Seed the normalized item catalog (items.plu / items.name) from a JSON file.

The file holds either a list of {"plu": ..., "name": ...} objects or an
object with an "items" list, i.e. the same body POST /api/items/seed takes.

Run from the repo root:
  python backend/scripts/seed_items.py catalog.json
"""

# Allow running from repo root by ensuring `backend/` is on sys.path
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from core.config import get_settings  # noqa: E402
from db.bootstrap import ensure_schema  # noqa: E402
from db.database import Database  # noqa: E402
from schemas.items import ItemsSeedRequest  # noqa: E402
from services.normalized_store import NormalizedStockStore  # noqa: E402


def load_items(path: Path) -> ItemsSeedRequest:
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, list):
        data = {"items": data}
    return ItemsSeedRequest.model_validate(data)


async def seed_items(path: Path, dry_run: bool) -> int:
    request = load_items(path)
    if dry_run:
        print(f"[seed_items] DRY RUN: would upsert {len(request.items)} items from {path}")
        return len(request.items)

    settings = get_settings()
    settings.validate()
    database = Database(settings)
    try:
        await ensure_schema(database, ["normalized"])
        async with database.session_maker() as session:
            processed = await NormalizedStockStore(session).seed_items(request.items)
    finally:
        await database.dispose()

    print(f"[seed_items] Upserted {processed} items from {path}")
    return processed


def main():
    p = argparse.ArgumentParser()
    p.add_argument("path", type=Path, help="JSON file with the items to seed")
    p.add_argument("--dry-run", action="store_true", help="Validate the file without touching the database")
    args = p.parse_args()

    asyncio.run(seed_items(args.path, dry_run=args.dry_run))


if __name__ == "__main__":
    main()
