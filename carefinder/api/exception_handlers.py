"""Global exception handlers for structured JSON error responses."""

from __future__ import annotations

import logging

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("carefinder.errors")

_PASSTHROUGH_HEADER_PREFIXES = ("X-RateLimit-", "Retry-After")


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return ``{"error": ..., "status_code": ...}`` for HTTP exceptions.

    Rate-limit headers on the exception are carried over to the response.
    """
    headers = {}
    if exc.headers:
        headers = {
            k: v
            for k, v in exc.headers.items()
            if k.startswith(_PASSTHROUGH_HEADER_PREFIXES)
        }

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail), "status_code": exc.status_code},
        headers=headers,
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 422 with the offending parameters listed under ``detail``."""
    return JSONResponse(
        status_code=422,
        content={
            "error": "Invalid request parameters",
            "status_code": 422,
            "detail": jsonable_encoder(exc.errors()),
        },
    )


async def unhandled_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """Catch-all: log the traceback, answer with a generic 500."""
    logger.error(
        "Unhandled exception on %s %s",
        request.method,
        request.url.path,
        exc_info=(type(exc), exc, exc.__traceback__),
    )

    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "status_code": 500},
    )
