"""Batch order invalidation against a remote purchases API."""

__version__ = "0.1.0"
