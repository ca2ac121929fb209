"""HTTP middleware."""
from festgate.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
