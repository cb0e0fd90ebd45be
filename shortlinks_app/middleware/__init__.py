"""HTTP middleware for the short link service."""

from .logging import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
