"""kvresolver — pick and construct a storage backend from a connection string."""

from kvresolver.errors import ConfigurationError, ResolverError, UnsupportedSchemeError
from kvresolver.factory import build_registry, create_resolver
from kvresolver.registry import BackendFamily, SchemeRegistry, preset_registry
from kvresolver.resolver import BackendResolver, parse_scheme, resolve

__version__ = "0.1.0"

__all__ = [
    "BackendFamily",
    "BackendResolver",
    "ConfigurationError",
    "ResolverError",
    "SchemeRegistry",
    "UnsupportedSchemeError",
    "__version__",
    "build_registry",
    "create_resolver",
    "parse_scheme",
    "preset_registry",
    "resolve",
]
