from collections.abc import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from core.config import Settings
from core.errors import NotReadyError


class Base(DeclarativeBase):
    pass


def _enable_sqlite_foreign_keys(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Owns the engine (and its connection pool) for the lifetime of the app.

    Created once in the application lifespan, stored on `app.state.database`
    and handed to request handlers through `get_database`.
    """

    def __init__(self, settings: Settings):
        url = make_url(settings.sqlalchemy_url())
        engine_kwargs = {"echo": settings.database_echo, "pool_pre_ping": True}
        if url.get_backend_name() != "sqlite":
            engine_kwargs.update(
                pool_size=settings.db_pool_size,
                max_overflow=0,
                pool_timeout=settings.db_pool_timeout,
            )
        self.engine = create_async_engine(url, **engine_kwargs)
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        self.session_maker = async_sessionmaker(self.engine, expire_on_commit=False)
        self.ready = False

    @property
    def dialect_name(self) -> str:
        return self.engine.dialect.name

    async def ping(self) -> None:
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def dispose(self) -> None:
        self.ready = False
        await self.engine.dispose()


def get_database(request: Request) -> Database:
    database = getattr(request.app.state, "database", None)
    if database is None or not database.ready:
        raise NotReadyError("Pool not ready")
    return database


async def get_async_session(
    database: Database = Depends(get_database),
) -> AsyncGenerator[AsyncSession, None]:
    async with database.session_maker() as session:
        yield session
