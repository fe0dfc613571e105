import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse, PlainTextResponse

from core.errors import error_body
from db.database import Database, get_database
from schemas.stock import HealthStatus, Pong

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_class=PlainTextResponse)
async def root():
    return "stock-api up"


@router.get("/api/ping", response_model=Pong)
async def ping():
    return Pong()


@router.get("/health", response_model=HealthStatus, response_model_exclude_none=True)
@router.get("/api/health", response_model=HealthStatus, response_model_exclude_none=True)
async def health(database: Database = Depends(get_database)):
    """`{ok: true}` when a pooled connection answers `SELECT 1`."""
    try:
        await database.ping()
    except Exception as e:
        logger.warning("health check failed: %r", e)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body(str(e) or type(e).__name__),
        )
    return HealthStatus(ok=True)
