# src/picklerank/middleware/__init__.py

"""Middleware components for PickleRank API."""

from .logging import RequestLoggingMiddleware

__all__ = ["RequestLoggingMiddleware"]
