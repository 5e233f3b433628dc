"""
Utility functions and helpers
"""

from sales_reports.utils.logger import setup_logger
from sales_reports.utils.exceptions import BaseAppException, ValidationError, ExecutorError
from sales_reports.utils.validators import parse_calendar_date, parse_int_set

__all__ = [
    # Logger
    "setup_logger",

    # Exceptions
    "BaseAppException",
    "ValidationError",
    "ExecutorError",

    # Validators
    "parse_calendar_date",
    "parse_int_set",
]
