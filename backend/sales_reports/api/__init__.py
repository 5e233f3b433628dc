"""
API module for handling HTTP requests
"""

from sales_reports.api.routes import reports

__all__ = ["reports"]
