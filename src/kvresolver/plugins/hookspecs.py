"""Pluggy hook specifications for contributing backend families."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from kvresolver.registry import BackendFamily

hookspec = pluggy.HookspecMarker("kvresolver")


class KvResolverHookSpec:
    """Hook specifications for the kvresolver plugin system."""

    @hookspec
    def register_backend_families(self) -> list[BackendFamily] | None:
        """Return backend families to add to the scheme registry."""
