"""
Pydantic models for the sales reports.

This module defines:
- FilterSet, the normalized report filters shared by every report
- The typed result records returned by the report service
"""

import datetime as dt
from decimal import Decimal
from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_validator
from pydantic.alias_generators import to_camel

from sales_reports.utils.validators import MAX_ID, parse_calendar_date, parse_int_set


# Decimals stay exact in Python and go out as JSON numbers
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class ReportModel(BaseModel):
    """Base for report payloads: snake_case in Python, camelCase on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


# =============================================================================
# FILTERS
# =============================================================================

class FilterSet(ReportModel):
    """
    Optional filter dimensions applied to every report.

    An absent or empty dimension imposes no restriction. Dimensions combine
    with AND; values inside a set-valued dimension combine with OR.
    """

    start_date: Optional[dt.date] = Field(default=None, description="Inclusive start day")
    end_date: Optional[dt.date] = Field(default=None, description="Inclusive end day")
    channel_ids: List[int] = Field(default_factory=list, description="Sales channel ids")
    store_ids: List[int] = Field(default_factory=list, description="Store ids")
    day_of_week: List[int] = Field(
        default_factory=list,
        description="Weekdays, 0 = Sunday ... 6 = Saturday",
    )

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _parse_date(cls, value: Any, info) -> Optional[dt.date]:
        return parse_calendar_date(to_camel(info.field_name), value)

    @field_validator("channel_ids", "store_ids", mode="before")
    @classmethod
    def _parse_ids(cls, value: Any, info) -> List[int]:
        return parse_int_set(to_camel(info.field_name), value, minimum=1, maximum=MAX_ID)

    @field_validator("day_of_week", mode="before")
    @classmethod
    def _parse_day_of_week(cls, value: Any) -> List[int]:
        return parse_int_set("dayOfWeek", value, minimum=0, maximum=6)

    @property
    def is_empty(self) -> bool:
        return not (
            self.start_date or self.end_date or self.channel_ids or self.store_ids or self.day_of_week
        )


# =============================================================================
# RESULTS
# =============================================================================

class KpiResult(ReportModel):
    """Headline KPIs over the filtered scope"""
    total_revenue: Money = Decimal("0")
    avg_ticket: Money = Decimal("0")
    total_sales: int = 0
    cancel_rate: float = Field(default=0.0, ge=0.0, le=1.0)


class RevenuePoint(ReportModel):
    """Completed revenue for one calendar day"""
    date: dt.date
    revenue: Money = Decimal("0")


class TopProduct(ReportModel):
    product_id: int
    name: str
    total_sold: int
    total_revenue: Money


class StoreComparison(ReportModel):
    store_id: int
    name: str
    value: Money


class ChannelResult(ReportModel):
    id: int
    name: str


class StoreResult(ReportModel):
    id: int
    name: str


class DashboardResult(ReportModel):
    """The four filtered reports for one dashboard refresh"""
    kpis: KpiResult
    revenue_over_time: List[RevenuePoint]
    top_products: List[TopProduct]
    store_comparison: List[StoreComparison]
