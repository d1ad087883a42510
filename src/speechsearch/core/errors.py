"""Exceptions raised by the search service."""
from __future__ import annotations

from typing import Optional


class SpeechSearchError(RuntimeError):
    """Base class for all errors raised by :mod:`speechsearch`."""


class InvalidIntervalError(SpeechSearchError, ValueError):
    """Raised when a timeline interval is not one of the allowed values."""

    def __init__(self, interval: object) -> None:
        super().__init__(f"invalid interval: {interval}")
        self.interval = interval


class UpstreamQueryError(SpeechSearchError):
    """Raised when a round trip to the search index fails."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(SpeechSearchError, LookupError):
    """Raised when a speech looked up by id does not exist."""

    def __init__(self, identifier: str) -> None:
        super().__init__(f"speech {identifier} not found")
        self.identifier = identifier


__all__ = ["InvalidIntervalError", "NotFoundError", "SpeechSearchError", "UpstreamQueryError"]
