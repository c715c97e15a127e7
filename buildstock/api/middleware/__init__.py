"""API middleware."""

from buildstock.api.middleware.error_handler import ErrorHandlerMiddleware
from buildstock.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware"]
