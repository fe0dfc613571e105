"""Error taxonomy and the handlers that turn errors into `{ok: false, error}`."""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import exc as sa_exc

logger = logging.getLogger(__name__)


class StockApiError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigError(StockApiError):
    pass


class ValidationError(StockApiError):
    status_code = status.HTTP_400_BAD_REQUEST


class ConstraintViolation(StockApiError):
    status_code = status.HTTP_409_CONFLICT


class StoreConnectionError(StockApiError):
    """The store could not be reached."""

    def __init__(self, message: str, step: str = "query"):
        super().__init__(message)
        self.step = step


class SchemaError(StockApiError):
    def __init__(self, message: str, step: str = "create"):
        super().__init__(message)
        self.step = step


class NotReadyError(StockApiError):
    pass


class UnsupportedOperation(StockApiError):
    status_code = status.HTTP_404_NOT_FOUND


def error_body(message: str) -> dict:
    return {"ok": False, "error": message}


def _field_name(loc) -> str:
    # ("body", "items", 0, "name") -> "items[0].name"
    parts = [p for p in loc if p not in ("body", "query", "path")]
    if not parts:
        return "body"
    if isinstance(parts[0], int):
        parts.insert(0, "body")
    out = ""
    for p in parts:
        if isinstance(p, int):
            out += f"[{p}]"
        else:
            out = f"{out}.{p}" if out else str(p)
    return out


def describe_validation_errors(errors) -> str:
    """Collapse pydantic error dicts into one message naming the fields."""
    missing = []
    invalid = []
    for err in errors:
        name = _field_name(err.get("loc", ()))
        if err.get("type") == "missing":
            if name not in missing:
                missing.append(name)
        else:
            msg = str(err.get("msg", "invalid value"))
            if msg.startswith("Value error, "):
                msg = msg[len("Value error, "):]
            invalid.append(f"{name}: {msg}")
    parts = []
    if missing:
        parts.append(f"{', '.join(missing)} required")
    parts.extend(invalid)
    return "; ".join(parts) or "invalid request"


async def _stock_api_error_handler(request: Request, e: StockApiError):
    if e.status_code >= 500:
        logger.error("[%s %s] %s: %s", request.method, request.url.path, type(e).__name__, e.message)
    return JSONResponse(status_code=e.status_code, content=error_body(e.message))


async def _request_validation_handler(request: Request, e: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(describe_validation_errors(e.errors())),
    )


async def _integrity_error_handler(request: Request, e: sa_exc.IntegrityError):
    logger.warning("[%s %s] constraint violation: %s", request.method, request.url.path, e.orig)
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content=error_body(str(e.orig)))


async def _pool_timeout_handler(request: Request, e: sa_exc.TimeoutError):
    logger.error("[%s %s] pool exhausted: %s", request.method, request.url.path, e)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=error_body("Pool exhausted: no database connection available"),
    )


async def _connection_error_handler(request: Request, e: sa_exc.DBAPIError):
    logger.error("[%s %s] store error: %r", request.method, request.url.path, e)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(str(getattr(e, "orig", None) or e)),
    )


async def _unhandled_error_handler(request: Request, e: Exception):
    logger.exception("[%s %s] unhandled error", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(str(e) or type(e).__name__),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StockApiError, _stock_api_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(sa_exc.IntegrityError, _integrity_error_handler)
    app.add_exception_handler(sa_exc.TimeoutError, _pool_timeout_handler)
    app.add_exception_handler(sa_exc.DBAPIError, _connection_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
