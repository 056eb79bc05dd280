"""Zotero library exceptions."""

from __future__ import annotations

from typing import Any


class ZoteroError(Exception):
    """Base exception for Zotero library errors."""


class ValidationError(ZoteroError, ValueError):
    """Raised when caller input fails validation."""


class RemoteError(ZoteroError):
    """Raised when the Zotero API answers with a non-success status."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        reason: str | None = None,
    ):
        self.status_code = status_code
        self.reason = reason
        super().__init__(message)


class AuthenticationError(RemoteError):
    """Raised when the API key is rejected or lacks access (401/403)."""


class ZoteroConnectionError(ZoteroError):
    """Raised when connecting to a library fails below the HTTP status level.

    Carries the credential, library id and library type for diagnostics.
    The message only shows the last four characters of the key, but
    ``api_key`` holds the full value: do not log this object carelessly.
    """

    def __init__(
        self,
        api_key: str,
        library_id: str,
        library_type: str,
        original: BaseException,
    ):
        self.api_key = api_key
        self.library_id = library_id
        self.library_type = library_type
        self.original = original
        super().__init__(
            f"Connection failed - API key: {mask_key(api_key)}, ID: {library_id}, "
            f"Type: {library_type}. {original}"
        )


class MalformedResponseError(ZoteroError):
    """Raised when a response body has an unrecognised shape."""

    def __init__(self, message: str, payload: Any = None):
        self.payload = payload
        super().__init__(message)


def mask_key(api_key: str) -> str:
    """Hide all but the last four characters of an API key."""
    if len(api_key) <= 4:
        return "*" * len(api_key)
    return "*" * (len(api_key) - 4) + api_key[-4:]
