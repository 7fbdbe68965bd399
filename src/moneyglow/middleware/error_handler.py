"""Global exception handlers. Every error leaves the API as ``{"detail": ...}``."""

import anthropic
import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from moneyglow.errors import MoneyGlowError

logger = structlog.get_logger()


def setup_error_handlers(app: FastAPI) -> None:
    """Register exception handlers on the app."""

    @app.exception_handler(MoneyGlowError)
    async def domain_error_handler(request: Request, exc: MoneyGlowError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.warning("domain_error", path=request.url.path, reason=exc.reason, status=exc.status_code)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.reason})

    @app.exception_handler(anthropic.APIError)
    async def coach_error_handler(request: Request, exc: anthropic.APIError) -> JSONResponse:
        logger.error("coach_api_error", path=request.url.path, error=str(exc))
        return JSONResponse(status_code=502, content={"detail": "AI coach is temporarily unavailable"})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"detail": "Validation error", "errors": jsonable_errors(exc)},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "unhandled_exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=exc,
        )
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, object]]:
    """Validation errors minus the ``ctx``/``input`` payloads, which may hold non-JSON values."""
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]
