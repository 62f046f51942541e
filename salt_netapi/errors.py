"""
Error taxonomy for salt-api calls.

Every failure raised by this package derives from :class:`SaltError`, so call
sites only need to handle a single category.
"""

from __future__ import annotations

from typing import Optional


class SaltError(RuntimeError):
    """Base class for everything raised while talking to the master."""


class TransportError(SaltError):
    """Raised when the HTTP exchange fails or returns a non-2xx status."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(TransportError):
    """Raised when the master rejects the token or the inline credentials."""


class ProtocolError(SaltError):
    """Raised when the response envelope does not have the expected shape."""


class SerializationError(SaltError):
    """Raised when a response body cannot be decoded into the declared result type."""
