"""Idempotent schema bootstrap, run once at startup before serving."""
import logging
from typing import Iterable, List

from sqlalchemy import Table

from core.errors import SchemaError, StoreConnectionError
from db.count import Count
from db.database import Base, Database
from db.item import Item
from db.stock_count import StockCount

logger = logging.getLogger(__name__)

# parents before the tables holding foreign keys to them
MODE_TABLES = {
    "flat": [StockCount.__table__],
    "normalized": [Item.__table__, Count.__table__],
}


def tables_for_modes(modes: Iterable[str]) -> List[Table]:
    tables: List[Table] = []
    for mode in modes:
        for table in MODE_TABLES[mode]:
            if table not in tables:
                tables.append(table)
    return tables


async def ensure_schema(database: Database, modes: Iterable[str]) -> None:
    """Check connectivity, then CREATE TABLE IF NOT EXISTS for every table of `modes`.

    Raises StoreConnectionError (step="connect") or SchemaError (step="create").
    """
    tables = tables_for_modes(modes)

    try:
        await database.ping()
    except Exception as e:
        raise StoreConnectionError(f"cannot connect to database: {e}", step="connect") from e
    logger.info("Database pool ready (%s)", database.dialect_name)

    try:
        async with database.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all, tables=tables, checkfirst=True)
    except Exception as e:
        raise SchemaError(f"cannot create schema: {e}", step="create") from e
    logger.info("Schema ensured: %s", ", ".join(t.name for t in tables))
