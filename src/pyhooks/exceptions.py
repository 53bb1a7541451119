"""Custom exception hierarchy for pyhooks."""

from __future__ import annotations


class HooksError(Exception):
    """Base exception for all pyhooks errors."""


class HooksConfigError(HooksError):
    """Invalid or missing configuration."""


class TransportError(HooksError):
    """Network-level failure issuing or completing a request."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str = "",
    ) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(message)


class HttpStatusError(TransportError):
    """Response carried a status code outside the 200-299 range.

    The message always names the numeric status (``HTTP 500 from ...``).
    No retry is attempted.
    """


class SerializationError(HooksError):
    """Persisted content could not be encoded or decoded."""


class PersistenceWriteError(HooksError):
    """Durable store rejected a write (e.g. quota exceeded)."""

    def __init__(self, message: str, *, key: str = "") -> None:
        self.key = key
        super().__init__(message)
