"""Typed SQL statement builder and query façade demo for MySQL."""

__version__ = "0.1.0"
