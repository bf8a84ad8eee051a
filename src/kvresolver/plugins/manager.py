"""Plugin discovery and loading.

Discovery: entry_points (pip-installed) in the ``kvresolver.backends``
group via pluggy setuptools entrypoints. Plugins are only consulted at
process start, when the scheme registry is built.
"""

from __future__ import annotations

import inspect
import logging

import pluggy

from kvresolver.plugins.hookspecs import KvResolverHookSpec
from kvresolver.registry import BackendFamily

PROJECT_NAME = "kvresolver"
ENTRY_POINT_GROUP = "kvresolver.backends"

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages plugin discovery, loading, and backend family collection."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(KvResolverHookSpec)
        self._loaded: bool = False

    def discover_and_load(self) -> list[str]:
        """Load entry-point plugins and return the names of all plugins."""
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._normalize_plugin_instances()
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    @property
    def is_loaded(self) -> bool:
        """Whether discover_and_load() has been called."""
        return self._loaded

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    def get_plugins(self) -> list[object]:
        return list(self._pm.get_plugins())

    def list_plugin_names(self) -> list[str]:
        return [self._pm.get_name(p) or p.__class__.__name__ for p in self._pm.get_plugins()]

    def collect_families(self) -> list[BackendFamily]:
        """Gather backend families from every registered plugin.

        A plugin that raises or returns something other than a list of
        :class:`BackendFamily` is logged and skipped.
        """
        families: list[BackendFamily] = []
        for plugin in self._pm.get_plugins():
            plugin_name = self._pm.get_name(plugin) or plugin.__class__.__name__
            families.extend(self._plugin_families(plugin, plugin_name))
        return families

    @staticmethod
    def _plugin_families(plugin: object, plugin_name: str) -> list[BackendFamily]:
        hook = getattr(plugin, "register_backend_families", None)
        if hook is None:
            return []

        try:
            result = hook()
        except Exception:
            logger.warning(
                "Failed to collect backend families from plugin %s",
                plugin_name,
                exc_info=True,
            )
            return []

        if result is None:
            return []
        if not isinstance(result, list):
            logger.warning("Plugin %s returned non-list backend families", plugin_name)
            return []

        families: list[BackendFamily] = []
        for family in result:
            if not isinstance(family, BackendFamily):
                logger.warning(
                    "Skipping non-BackendFamily registration %r from plugin %s",
                    family,
                    plugin_name,
                )
                continue
            families.append(family)
        return families

    def _normalize_plugin_instances(self) -> None:
        """Replace registered plugin classes with instantiated objects.

        Entry-point loading may register a plugin class directly. Hook dispatch
        against class objects leaves ``self`` unbound and fails at runtime.
        """
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin):
                continue
            if not self._has_hook_impls(plugin):
                continue

            plugin_name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)

            try:
                instance = plugin()
            except Exception:
                logger.warning(
                    "Failed to instantiate entry-point plugin %s",
                    plugin_name,
                    exc_info=True,
                )
                continue

            self._pm.register(instance, name=plugin_name)
            logger.debug("Instantiated entry-point plugin: %s", plugin_name)

    @staticmethod
    def _has_hook_impls(cls: type) -> bool:
        """Check whether *cls* has any methods decorated with ``@hookimpl``.

        Pluggy's ``HookimplMarker("kvresolver")`` sets a ``kvresolver_impl``
        attribute on decorated methods.
        """
        for name in dir(cls):
            if name.startswith("_"):
                continue
            method = getattr(cls, name, None)
            if callable(method) and getattr(method, "kvresolver_impl", None):
                return True
        return False
