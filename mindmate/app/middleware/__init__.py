"""HTTP middleware for MindMate."""

from .logging import RequestLoggingMiddleware

__all__ = ["RequestLoggingMiddleware"]
