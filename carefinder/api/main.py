from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from carefinder.api.exception_handlers import (
    http_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from carefinder.api.middleware import RequestLoggingMiddleware
from carefinder.api.routes.search import router as search_router
from carefinder.api.schemas import HealthResponse
from carefinder.config import settings
from carefinder.db.session import engine
from carefinder.logging_config import setup_logging
from carefinder.services.metrics import metrics
from carefinder.services.rate_limiter import search_rate_limiter

logger = logging.getLogger("carefinder")

VERSION = "1.0.0"

_DESCRIPTION = """\
Search API for a mental-health care directory.

One query searches **treatments** (medications, therapies, interventional,
alternative and investigational treatments, supplements), **conditions**
and **resources** (articles, assessments, crisis lines, support groups).

### Matching

The query is split on whitespace and a record matches only when it
contains **every** term somewhere in its name, description, slug,
category, brand names, metadata or content. Matching is case-insensitive
substring containment, so `therap` matches `therapist`.

### Ranking

Results from all three collections are ranked together: more matched
terms first, then exact name matches, brand-name matches (e.g. `zoloft`
for sertraline), and names starting with the query or one of its terms.
"""

_OPENAPI_TAGS = [
    {
        "name": "system",
        "description": "Liveness and operational endpoints.",
    },
    {
        "name": "search",
        "description": (
            "Ranked multi-term search with per-term highlight snippets "
            "across treatments, conditions and resources."
        ),
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level, settings.log_format)
    logger.info(
        "Starting CareFinder API %s (rate limiting %s)",
        VERSION,
        "on" if search_rate_limiter.enabled else "off",
    )
    yield
    await engine.dispose()


app = FastAPI(
    title="CareFinder Search API",
    version=VERSION,
    summary="Search across treatments, conditions and resources",
    description=_DESCRIPTION,
    openapi_tags=_OPENAPI_TAGS,
    lifespan=lifespan,
)

# Exception handlers
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# CORS
origins = [o.strip() for o in settings.cors_origins.split(",")]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

# Request logging
app.add_middleware(RequestLoggingMiddleware)

app.include_router(search_router)


@app.get(
    "/api/health",
    tags=["system"],
    summary="Health check",
    description="Liveness probe for monitoring and uptime checks. Does not "
    "touch the database.",
    response_model=HealthResponse,
)
async def health():
    """Report that the service is up."""
    return {
        "ok": True,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": VERSION,
        "uptime_seconds": metrics.uptime_seconds(),
    }


@app.get(
    "/metrics",
    tags=["system"],
    summary="Application metrics",
    description="Request counters, latency percentiles, search outcome "
    "counters and rate limiter state.",
)
async def get_metrics():
    """Return application metrics snapshot."""
    snap = metrics.snapshot()
    snap["rate_limiter"] = {
        "enabled": search_rate_limiter.enabled,
        "active_clients": search_rate_limiter.active_clients,
    }
    return snap
