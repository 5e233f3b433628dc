"""
Business logic services
"""

from sales_reports.services.clause_builder import (
    ClauseBuilder,
    WhereClause,
    build_where_clause,
    merge_clauses,
    shift_placeholders,
)
from sales_reports.services.report_service import ReportService, QueryExecutor

__all__ = [
    "ClauseBuilder",
    "WhereClause",
    "build_where_clause",
    "merge_clauses",
    "shift_placeholders",
    "ReportService",
    "QueryExecutor",
]
