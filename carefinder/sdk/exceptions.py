"""Exception hierarchy for the CareFinder SDK."""

from __future__ import annotations

from carefinder.sdk.models import RateLimitInfo


class CareFinderError(Exception):
    """Base exception for all CareFinder API errors."""

    def __init__(self, status_code: int, detail: str) -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"{status_code}: {detail}")


class RateLimitError(CareFinderError):
    """Raised on 429 responses."""

    def __init__(
        self,
        status_code: int,
        detail: str,
        rate_limit_info: RateLimitInfo | None = None,
        retry_after: int | None = None,
    ) -> None:
        super().__init__(status_code, detail)
        self.rate_limit_info = rate_limit_info
        self.retry_after = retry_after


class NotFoundError(CareFinderError):
    """Raised on 404 responses."""


class ValidationError(CareFinderError):
    """Raised on 400 or 422 responses."""


class ServerError(CareFinderError):
    """Raised on 5xx responses (e.g. a failed search)."""
