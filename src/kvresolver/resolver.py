"""Backend resolution — connection string -> backend instance.

The scheme is the text before the first ``:``. The matching constructor is
called with the *full* connection string, since backends may branch on the
scheme themselves (e.g. SQLite flavours of one SQL family).

INVARIANT: only ConfigurationError and UnsupportedSchemeError originate
here. Whatever the backend constructor raises reaches the caller unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from kvresolver.errors import ConfigurationError, UnsupportedSchemeError
from kvresolver.registry import DELIMITER, BackendFactory, SchemeRegistry, preset_registry

logger = logging.getLogger(__name__)


def parse_scheme(url: str | None) -> str:
    """Return the scheme of *url*, raising ConfigurationError if malformed."""
    if not url:
        msg = "URL is missing"
        raise ConfigurationError(msg)
    pos = url.find(DELIMITER)
    if pos == -1:
        msg = "Invalid URL"
        raise ConfigurationError(msg)
    return url[:pos]


class BackendResolver:
    """Dispatch connection strings to registered backend constructors.

    The resolver holds no state besides its registry; every call to
    :meth:`resolve` constructs a new, caller-owned instance.
    """

    def __init__(self, registry: Mapping[str, BackendFactory] | None = None) -> None:
        if registry is None:
            registry = preset_registry()
        elif not isinstance(registry, SchemeRegistry):
            registry = MappingProxyType(dict(registry))
        self._registry: Mapping[str, BackendFactory] = registry

    @property
    def registry(self) -> Mapping[str, BackendFactory]:
        return self._registry

    @property
    def schemes(self) -> tuple[str, ...]:
        """Registered schemes, sorted."""
        return tuple(sorted(self._registry))

    def supports(self, scheme: str) -> bool:
        return scheme in self._registry

    def resolve(self, url: str | None) -> Any:
        """Construct the backend registered for *url*'s scheme."""
        scheme = parse_scheme(url)
        factory = self._registry.get(scheme)
        if factory is None:
            msg = "Unknown database"
            raise UnsupportedSchemeError(msg, scheme=scheme)
        instance = factory(url)
        backend = type(instance).__name__
        logger.debug(
            "Resolved scheme %r to %s",
            scheme,
            backend,
            extra={"scheme": scheme, "backend": backend},
        )
        return instance


def resolve(url: str | None, registry: Mapping[str, BackendFactory] | None = None) -> Any:
    """Resolve *url* against *registry* (default: the key-value-store preset)."""
    return BackendResolver(registry).resolve(url)
