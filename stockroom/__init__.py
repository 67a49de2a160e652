"""Stockroom: warehouse stock movements, alerts and dashboards."""

__version__ = "1.0.0"
