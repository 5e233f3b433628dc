"""
API route definitions
"""

from sales_reports.api.routes import reports

__all__ = ["reports"]
