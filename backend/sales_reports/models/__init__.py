"""Pydantic models for API endpoints."""

from sales_reports.models.reports import (
    Money,
    FilterSet,
    KpiResult,
    RevenuePoint,
    TopProduct,
    StoreComparison,
    ChannelResult,
    StoreResult,
    DashboardResult,
)

__all__ = [
    "Money",
    "FilterSet",
    "KpiResult",
    "RevenuePoint",
    "TopProduct",
    "StoreComparison",
    "ChannelResult",
    "StoreResult",
    "DashboardResult",
]
