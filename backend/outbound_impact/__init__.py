"""Outbound Impact backend core: tenant schema, migration runner, admin bootstrap."""

__version__ = "0.1.0"
