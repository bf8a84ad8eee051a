"""Built-in backend families.

Modules here are imported lazily by the registry, never at package import.
"""
