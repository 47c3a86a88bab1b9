"""Migrate legacy PHP source trees to a PSR-4 namespaced layout."""

__version__ = "0.1.0"
