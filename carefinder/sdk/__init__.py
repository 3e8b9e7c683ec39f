"""CareFinder Python SDK: typed clients for the CareFinder Search API."""

from __future__ import annotations

from carefinder.sdk.client import AsyncCareFinderClient, CareFinderClient
from carefinder.sdk.exceptions import (
    CareFinderError,
    NotFoundError,
    RateLimitError,
    ServerError,
    ValidationError,
)
from carefinder.sdk.models import RateLimitInfo, group_by_type

__all__ = [
    "AsyncCareFinderClient",
    "CareFinderClient",
    "CareFinderError",
    "NotFoundError",
    "RateLimitError",
    "ServerError",
    "ValidationError",
    "RateLimitInfo",
    "group_by_type",
]
