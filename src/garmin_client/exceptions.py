"""Garmin client exceptions, placed inside the coach error taxonomy."""

from __future__ import annotations

from coach_engine.errors import CoachError, TransientNetworkError, UpstreamRejection


class GarminClientError(CoachError):
    """Base exception for all garmin_client errors."""


class GarminAPIError(GarminClientError, UpstreamRejection):
    """A Garmin Connect API call was refused (non-retryable 4xx)."""


class GarminAuthError(GarminAPIError):
    """Authentication failed (bad credentials, expired tokens, etc.)."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=401)


class GarminMFARequired(GarminAuthError):
    """Multi-factor authentication is required to complete login."""


class GarminConnectionError(GarminClientError, TransientNetworkError):
    """Garmin Connect unreachable, timing out or answering 5xx."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GarminRateLimitError(GarminConnectionError):
    """HTTP 429 — too many requests."""

    def __init__(self, message: str = "Rate limited by Garmin Connect") -> None:
        super().__init__(message, status_code=429)
