"""Resolution errors.

Both error types are raised synchronously, before any backend is
constructed. Failures inside a backend constructor are never wrapped.
"""

from __future__ import annotations


class ResolverError(Exception):
    """Base class for errors raised by kvresolver itself."""


class ConfigurationError(ResolverError, ValueError):
    """The connection string (or a registry/config definition) is invalid."""


class UnsupportedSchemeError(ResolverError, LookupError):
    """No backend family is registered for the connection string's scheme."""

    def __init__(self, message: str, *, scheme: str | None = None) -> None:
        super().__init__(message)
        self.scheme = scheme
