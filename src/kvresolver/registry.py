"""Scheme registry — scheme alias -> lazily loaded backend constructor.

A :class:`BackendFamily` groups the aliases that address one backend
implementation. Its ``target`` may be the constructor itself or an import
reference (``"package.module:Attribute"``) that is only imported when one
of the family's schemes is resolved, so consumers never pay for backend
families they do not use.

INVARIANT: a built :class:`SchemeRegistry` is never mutated.
"""

from __future__ import annotations

import importlib
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from kvresolver.errors import ConfigurationError

BackendFactory = Callable[[str], Any]

DELIMITER = ":"


@dataclass(frozen=True)
class BackendFamily:
    """A named backend implementation addressable by one or more schemes."""

    name: str
    aliases: tuple[str, ...]
    target: str | BackendFactory

    def load(self) -> BackendFactory:
        """Return the constructor, importing it on first use if needed."""
        if not isinstance(self.target, str):
            return self.target
        module_name, _, attr = self.target.partition(":")
        if not module_name or not attr:
            msg = f"Backend family {self.name!r} has invalid target {self.target!r}"
            raise ConfigurationError(msg)
        module = importlib.import_module(module_name)
        return getattr(module, attr)

    def __call__(self, url: str) -> Any:
        return self.load()(url)


class SchemeRegistry(Mapping[str, BackendFamily]):
    """Read-only, case-sensitive mapping of scheme -> :class:`BackendFamily`."""

    def __init__(self, entries: Mapping[str, BackendFamily]) -> None:
        self._entries = MappingProxyType(dict(entries))

    @classmethod
    def from_families(cls, families: Iterable[BackendFamily]) -> SchemeRegistry:
        """Build a registry, rejecting malformed or duplicated aliases."""
        entries: dict[str, BackendFamily] = {}
        for family in families:
            for alias in family.aliases:
                _check_alias(alias, family.name)
                if alias in entries:
                    msg = (
                        f"Scheme {alias!r} is claimed by both "
                        f"{entries[alias].name!r} and {family.name!r}"
                    )
                    raise ConfigurationError(msg)
                entries[alias] = family
        return cls(entries)

    def extended(self, families: Iterable[BackendFamily]) -> tuple[SchemeRegistry, list[str]]:
        """Return a new registry with *families* added, plus the skipped schemes.

        Schemes already present keep their current family.
        """
        entries = dict(self._entries)
        skipped: list[str] = []
        for family in families:
            for alias in family.aliases:
                _check_alias(alias, family.name)
            for alias in family.aliases:
                if alias in entries:
                    skipped.append(alias)
                    continue
                entries[alias] = family
        return SchemeRegistry(entries), skipped

    def lookup(self, scheme: str) -> BackendFamily | None:
        return self._entries.get(scheme)

    @property
    def families(self) -> tuple[BackendFamily, ...]:
        """Distinct families in registration order."""
        return tuple(dict.fromkeys(self._entries.values()))

    def __getitem__(self, scheme: str) -> BackendFamily:
        return self._entries[scheme]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"SchemeRegistry({sorted(self._entries)!r})"


def _check_alias(alias: str, family_name: str) -> None:
    if not alias:
        msg = f"Backend family {family_name!r} declares an empty scheme"
        raise ConfigurationError(msg)
    if DELIMITER in alias:
        msg = f"Scheme {alias!r} of family {family_name!r} must not contain {DELIMITER!r}"
        raise ConfigurationError(msg)


# ---------------------------------------------------------------------------
# Presets
# ---------------------------------------------------------------------------

ANYSQL_TARGET = "kvresolver.backends.anysql:AnySQLStore"

KEY_VALUE_STORE_FAMILIES: tuple[BackendFamily, ...] = (
    BackendFamily("anysql", ("mysql", "websql", "cordova-sqlite"), ANYSQL_TARGET),
)

STORE_LAYER_FAMILIES: tuple[BackendFamily, ...] = (
    BackendFamily("anysql", ("mysql", "websql", "sqlite"), ANYSQL_TARGET),
)

PRESETS: Mapping[str, tuple[BackendFamily, ...]] = MappingProxyType(
    {
        "key-value-store": KEY_VALUE_STORE_FAMILIES,
        "store-layer": STORE_LAYER_FAMILIES,
    }
)

DEFAULT_PRESET = "key-value-store"


def preset_registry(name: str = DEFAULT_PRESET) -> SchemeRegistry:
    """Return the registry for a named preset."""
    try:
        families = PRESETS[name]
    except KeyError:
        msg = f"Unknown registry preset {name!r}; expected one of {sorted(PRESETS)}"
        raise ConfigurationError(msg) from None
    return SchemeRegistry.from_families(families)
