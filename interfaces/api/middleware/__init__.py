"""API middleware for error handling and cross-cutting concerns."""

from interfaces.api.middleware.error_handler import handle_use_case_errors, http_exception_handler
from interfaces.api.middleware.no_cache import add_no_cache_headers

__all__ = ["add_no_cache_headers", "handle_use_case_errors", "http_exception_handler"]
