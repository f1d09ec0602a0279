"""Error types shared by the card service handlers."""
from __future__ import annotations

from typing import Iterable


class CardServiceError(Exception):
    """Base error carrying the HTTP status a handler should answer with."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(CardServiceError):
    """A credential or identifier is missing; raised before any network I/O."""

    status_code = 500


class ValidationError(CardServiceError):
    """A required request field is absent."""

    status_code = 400

    def __init__(self, message: str, missing: Iterable[str] = ()) -> None:
        super().__init__(message)
        self.missing = list(missing)


class ProviderError(CardServiceError):
    """An upstream generation or delivery service failed."""

    status_code = 502


class PersistenceError(CardServiceError):
    """Saving a generated card failed. Callers treat this as a warning."""

    status_code = 500


__all__ = [
    "CardServiceError",
    "ConfigurationError",
    "ValidationError",
    "ProviderError",
    "PersistenceError",
]
