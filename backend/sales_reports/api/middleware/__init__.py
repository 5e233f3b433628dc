"""
Middleware components for request/response processing
"""

from sales_reports.api.middleware.cors import setup_cors
from sales_reports.api.middleware.error_handler import (
    error_handler_middleware,
    handle_error,
    register_exception_handlers,
)

__all__ = ["setup_cors", "error_handler_middleware", "handle_error", "register_exception_handlers"]
