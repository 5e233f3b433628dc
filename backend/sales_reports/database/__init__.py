"""
Database connection and report SQL
"""

from sales_reports.database.connection import DatabaseManager
from sales_reports.database.queries import (
    REPORT_QUERIES,
    COMPLETED_STATUS,
    CANCELED_STATUS,
    COMPLETED_ONLY,
    build_query,
)

__all__ = [
    "DatabaseManager",
    "REPORT_QUERIES",
    "COMPLETED_STATUS",
    "CANCELED_STATUS",
    "COMPLETED_ONLY",
    "build_query",
]
