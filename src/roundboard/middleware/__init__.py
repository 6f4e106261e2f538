# src/roundboard/middleware/__init__.py

"""Middleware components for Roundboard API."""

from .logging import RequestLoggingMiddleware

__all__ = ["RequestLoggingMiddleware"]
