"""
Report Service

Runs the sales reports against the query executor:
- KPIs (revenue, average ticket, completed sales, cancellation rate)
- Revenue over time, gap-filled with one point per calendar day
- Top products and store comparison rankings
- Channel and store lookups for the filter dropdowns
"""

import asyncio
from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Tuple

import sqlparse

from sales_reports.config import settings
from sales_reports.database.queries import COMPLETED_ONLY, build_query
from sales_reports.models.reports import (
    ChannelResult,
    DashboardResult,
    FilterSet,
    KpiResult,
    RevenuePoint,
    StoreComparison,
    StoreResult,
    TopProduct,
)
from sales_reports.services.clause_builder import ClauseBuilder, build_where_clause
from sales_reports.utils.exceptions import ExecutorError
from sales_reports.utils.logger import setup_logger

logger = setup_logger(__name__)

QueryExecutor = Callable[[str, Sequence[Any]], Awaitable[List[Dict[str, Any]]]]
Clock = Callable[[], date]

MAX_TOP_PRODUCTS = 10


def _decimal(value: Any) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


class ReportService:
    """Read-only sales reports over an injected query executor."""

    def __init__(
        self,
        executor: QueryExecutor,
        clock: Clock = date.today,
        lookback_days: Optional[int] = None,
        top_products_limit: Optional[int] = None,
    ):
        self.executor = executor
        self.clock = clock
        self.lookback_days = settings.DEFAULT_LOOKBACK_DAYS if lookback_days is None else lookback_days
        limit = settings.TOP_PRODUCTS_LIMIT if top_products_limit is None else top_products_limit
        self.top_products_limit = max(1, min(limit, MAX_TOP_PRODUCTS))

    async def _fetch(self, report: str, query: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        """Run one query; failures are logged with the exact query and parameters."""
        logger.debug(f"Executing {report} query: {query.strip()} params={list(params)!r}")
        try:
            return await self.executor(query, list(params))
        except Exception as e:
            logger.error(
                f"{report} query failed: {str(e)}",
                exc_info=True,
                extra={"extra_data": {
                    "report": report,
                    "query": sqlparse.format(query, reindent=True, strip_whitespace=True),
                    "params": [repr(p) for p in params],
                }},
            )
            if isinstance(e, ExecutorError):
                raise
            raise ExecutorError(f"{report} query failed: {str(e)}", code="QUERY_FAILED") from e

    async def get_kpis(self, filters: FilterSet) -> KpiResult:
        """Revenue, average ticket, completed sales and cancellation rate in one scan."""
        where = build_where_clause(filters, "s")
        query = build_query("kpis", where_clause=where.sql())

        rows = await self._fetch("kpis", query, where.params)
        row = rows[0] if rows else {}

        return KpiResult(
            total_revenue=_decimal(row.get("total_revenue")),
            avg_ticket=_decimal(row.get("avg_ticket")),
            total_sales=int(row.get("total_sales") or 0),
            cancel_rate=float(row.get("cancel_rate") or 0),
        )

    def revenue_window(self, filters: FilterSet) -> Tuple[date, date]:
        """Inclusive day range of the revenue series, defaulting to the lookback window."""
        today = self.clock()
        start = filters.start_date or today - timedelta(days=self.lookback_days)
        end = filters.end_date or today
        return start, end

    async def get_revenue_over_time(self, filters: FilterSet) -> List[RevenuePoint]:
        """
        Completed revenue per day over the whole window, zero-filled.

        The calendar bounds are bound first as ``$1``/``$2``; the filter
        clause is built independently from ``$1`` and shifted past them.
        """
        start, end = self.revenue_window(filters)

        bounds = ClauseBuilder()
        start_sql = bounds.bind(start)
        end_sql = bounds.bind(end)
        date_params = bounds.build().params

        where = build_where_clause(filters, "s").shifted(len(date_params))
        query = build_query(
            "revenue_over_time",
            start_date=start_sql,
            end_date=end_sql,
            where_clause=where.sql(COMPLETED_ONLY),
        )

        rows = await self._fetch("revenue_over_time", query, date_params + where.params)
        return [
            RevenuePoint(date=row["date"], revenue=_decimal(row.get("revenue")))
            for row in rows
        ]

    async def get_top_products(self, filters: FilterSet) -> List[TopProduct]:
        """Best sellers by completed revenue; ties broken by product id."""
        where = build_where_clause(filters, "s")
        limit_sql = ClauseBuilder(where.next_index).bind(self.top_products_limit)
        query = build_query("top_products", where_clause=where.sql(COMPLETED_ONLY), limit=limit_sql)

        rows = await self._fetch("top_products", query, where.params + (self.top_products_limit,))
        products = [
            TopProduct(
                product_id=row["product_id"],
                name=row["name"],
                total_sold=int(row.get("total_sold") or 0),
                total_revenue=_decimal(row.get("total_revenue")),
            )
            for row in rows[:self.top_products_limit]
        ]
        return products

    async def get_store_comparison(self, filters: FilterSet) -> List[StoreComparison]:
        """Completed revenue per store, highest first; ties broken by store id."""
        where = build_where_clause(filters, "s")
        query = build_query("store_comparison", where_clause=where.sql(COMPLETED_ONLY))

        rows = await self._fetch("store_comparison", query, where.params)
        return [
            StoreComparison(store_id=row["store_id"], name=row["name"], value=_decimal(row.get("value")))
            for row in rows
        ]

    async def get_channels(self) -> List[ChannelResult]:
        rows = await self._fetch("channels", build_query("channels"))
        return [ChannelResult(id=row["id"], name=row["name"]) for row in rows]

    async def get_stores(self) -> List[StoreResult]:
        rows = await self._fetch("stores", build_query("stores"))
        return [StoreResult(id=row["id"], name=row["name"]) for row in rows]

    async def get_dashboard(self, filters: FilterSet) -> DashboardResult:
        """All four reports for one filter set, fetched concurrently."""
        kpis, revenue, products, stores = await asyncio.gather(
            self.get_kpis(filters),
            self.get_revenue_over_time(filters),
            self.get_top_products(filters),
            self.get_store_comparison(filters),
        )
        return DashboardResult(
            kpis=kpis,
            revenue_over_time=revenue,
            top_products=products,
            store_comparison=stores,
        )
