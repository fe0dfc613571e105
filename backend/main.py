import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import exc as sa_exc

from core.config import Settings, get_settings
from core.errors import ConfigError, SchemaError, StoreConnectionError, register_exception_handlers
from db.bootstrap import ensure_schema
from db.database import Database
from routers.counts import router as counts_router
from routers.health import router as health_router
from routers.items import router as items_router
from routers.stock import router as stock_router

logger = logging.getLogger("stock_api")

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    try:
        settings.validate()
        database = Database(settings)
    # ArgumentError covers a malformed DATABASE_URL and an unknown dialect
    except (ConfigError, sa_exc.ArgumentError, ValueError, ImportError) as e:
        logger.error("Startup failed at step=config: %s", e)
        raise

    try:
        await ensure_schema(database, settings.modes)
    except (StoreConnectionError, SchemaError) as e:
        logger.error("Startup failed at step=%s: %s", e.step, e.message)
        await database.dispose()
        raise

    database.ready = True
    app.state.database = database
    logger.info("stock-api ready (mode=%s)", settings.stock_mode)
    try:
        yield
    finally:
        app.state.database = None
        await database.dispose()
        logger.info("Database pool closed")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Stock Count API",
        description="Records stock count observations and summarizes them per location",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(health_router, tags=["health"])

    # Flat shape: one stock_counts table
    if settings.flat_enabled:
        app.include_router(stock_router, prefix="/api/stock", tags=["stock"])

    # Normalized shape: items catalog + counts
    if settings.normalized_enabled:
        app.include_router(items_router, prefix="/api/items", tags=["items"])
        app.include_router(counts_router, prefix="/api", tags=["counts"])

    return app


app = create_app()

if __name__ == "__main__":
    _settings = app.state.settings
    uvicorn.run("main:app", host=_settings.host, port=_settings.port)
