"""Dealership catalog and CRM backend."""

__version__ = "1.0.0"
