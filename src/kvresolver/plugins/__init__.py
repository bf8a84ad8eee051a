"""Extension layer — backend family plugins via pluggy.

Discovery: entry_points (pip-installed) in the ``kvresolver.backends`` group.
INVARIANT: Plugin failures are warnings, never errors.
"""

import pluggy

from kvresolver.plugins.manager import PluginManager

hookimpl = pluggy.HookimplMarker("kvresolver")

__all__ = ["PluginManager", "hookimpl"]
