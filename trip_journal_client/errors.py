"""Error types for trip journal client interactions."""

from __future__ import annotations


class JournalClientError(Exception):
    """Base error for trip journal client failures."""


class BadUrl(JournalClientError, ValueError):
    """A URL could not be constructed from the configured origin."""


class BadResponse(JournalClientError):
    """Unexpected HTTP status or no usable response from the service.

    ``status`` is None when the transport failed before a status was received.
    """

    def __init__(self, status: int | None, message: str) -> None:
        super().__init__(message)
        self.status = status


class JournalTimeout(BadResponse):
    """Request or resource timeout while talking to the service."""

    def __init__(self, message: str) -> None:
        super().__init__(None, message)


class FailedToDecodeResponse(JournalClientError):
    """Response payload did not match the expected shape."""


class InvalidValue(JournalClientError):
    """Operation requires an authenticated session but none is present."""


class UnprocessableEntity(JournalClientError):
    """The service rejected the request as semantically invalid (HTTP 422)."""

    status = 422


class SessionExpired(JournalClientError):
    """The stored token is past its expiration date."""


class TokenStoreError(JournalClientError):
    """Token persistence backend failed."""


class ConfigLoadError(JournalClientError):
    """Configuration file could not be loaded."""
