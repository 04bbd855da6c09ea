"""
Zotero Web API error classes

Every failure raised by this package derives from :class:`ZoteroError`, which
carries a human-readable message, an optional numeric code and an optional
context mapping for diagnostics. Subclasses also inherit from the matching
builtin exception so callers can catch either.
"""

from __future__ import annotations

from typing import Any


class ZoteroError(Exception):
    """Base exception for all errors raised by the Zotero Web API client."""

    def __init__(
        self, message: str, code: int | None = None, context: dict[str, Any] | None = None
    ) -> None:
        self.message = message
        self.code = code
        self.context = context or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.code is not None:
            return f"{self.message} (Code: {self.code})"
        return self.message


class InvalidArgumentError(ZoteroError, ValueError):
    """A caller passed a malformed argument; detected before any I/O."""


class InvalidInputError(ZoteroError, ValueError):
    """An interactively entered or stored profile value failed validation."""


class NonInteractiveError(ZoteroError, OSError):
    """A profile must be created but no interactive terminal is attached."""


class AbortedError(ZoteroError):
    """The user cancelled an overwrite confirmation."""


class RequestTimeoutError(ZoteroError, TimeoutError):
    """The Zotero Web API did not respond within the configured timeout."""


class RequestFailedError(ZoteroError):
    """The Zotero Web API answered with a 4xx or 5xx status."""

    def __init__(self, status_code: int, body: str, url: str | None = None) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(
            f"Zotero Web API request failed with status {status_code}",
            code=status_code,
            context={"url": url, "body": body},
        )
