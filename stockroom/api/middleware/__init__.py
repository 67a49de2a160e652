"""API middleware."""

from stockroom.api.middleware.error_handler import ErrorHandlerMiddleware
from stockroom.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware"]
