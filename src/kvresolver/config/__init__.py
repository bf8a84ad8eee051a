"""Configuration — settings, TOML discovery, and logging setup."""

from kvresolver.config.logging import apply_logging_settings, configure_logging
from kvresolver.config.settings import ResolverSettings

__all__ = ["ResolverSettings", "apply_logging_settings", "configure_logging"]
