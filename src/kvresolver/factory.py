"""Process-start wiring: settings + plugins -> BackendResolver."""

from __future__ import annotations

import logging

from kvresolver.config.logging import apply_logging_settings
from kvresolver.config.settings import ResolverSettings
from kvresolver.errors import ConfigurationError
from kvresolver.plugins.manager import PluginManager
from kvresolver.registry import SchemeRegistry, preset_registry
from kvresolver.resolver import BackendResolver

logger = logging.getLogger(__name__)


def build_registry(base: SchemeRegistry, plugin_manager: PluginManager) -> SchemeRegistry:
    """Extend *base* with plugin-contributed families.

    Built-in schemes always win: a colliding plugin scheme is skipped, and a
    family with a malformed scheme is dropped whole. Both are warnings.
    """
    registry = base
    for family in plugin_manager.collect_families():
        try:
            registry, skipped = registry.extended([family])
        except ConfigurationError:
            logger.warning(
                "Skipping backend family %s",
                family.name,
                exc_info=True,
                extra={"family": family.name},
            )
            continue
        for scheme in skipped:
            logger.warning(
                "Skipping scheme %r from backend family %s: already registered by %s",
                scheme,
                family.name,
                registry[scheme].name,
                extra={"scheme": scheme, "family": family.name},
            )
    return registry


def create_resolver(
    settings: ResolverSettings | None = None,
    *,
    plugin_manager: PluginManager | None = None,
) -> BackendResolver:
    """Build a resolver from *settings* (default: discovered settings).

    Plugins are consulted when ``[registry] load_plugins`` is set or a
    *plugin_manager* is passed in. ``verbose`` / ``log_json`` settings are
    applied to logging before anything else runs.
    """
    if settings is None:
        settings = ResolverSettings.load()
    apply_logging_settings(settings)

    registry = preset_registry(settings.registry.preset)
    if settings.registry.load_plugins or plugin_manager is not None:
        if plugin_manager is None:
            plugin_manager = PluginManager()
        if not plugin_manager.is_loaded:
            plugin_manager.discover_and_load()
        registry = build_registry(registry, plugin_manager)

    schemes = sorted(registry)
    logger.debug(
        "Built resolver for schemes: %s",
        ", ".join(schemes),
        extra={"schemes": schemes},
    )
    return BackendResolver(registry)
