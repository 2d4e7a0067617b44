"""Exception taxonomy shared by the engine and its boundary adapters."""

from __future__ import annotations


class CoachError(Exception):
    """Base exception for all coach_engine errors."""


class TransientNetworkError(CoachError):
    """Busy, rate-limited or unreachable upstream. Safe to retry."""


class UpstreamRejection(CoachError):
    """Upstream refused the request (non-rate-limit 4xx). Not retried."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DataUnavailable(CoachError):
    """Wellness, power or goal data is missing. Callers apply a fallback."""


class ValidationFailure(CoachError):
    """A generated workout failed structural validation."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = list(errors or [])


class ConfigurationError(CoachError):
    """Required settings are missing. Raised before any external mutation."""
