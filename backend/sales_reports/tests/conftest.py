import re
from collections import defaultdict
from datetime import date, datetime, timedelta
from decimal import Decimal
from types import SimpleNamespace
from typing import Any, Dict, List, Sequence

import pytest

from sales_reports.services.clause_builder import PLACEHOLDER_PATTERN


# Predicates the report queries may contain, keyed by the placeholder they bind
SALE_PREDICATES = [
    (re.compile(r"s\.created_at >= \$(\d+)"), lambda sale, v: sale["created_at"] >= v),
    (re.compile(r"s\.created_at <= \$(\d+)"), lambda sale, v: sale["created_at"] <= v),
    (re.compile(r"s\.channel_id = ANY\(\$(\d+)\)"), lambda sale, v: sale["channel_id"] in v),
    (re.compile(r"s\.store_id = ANY\(\$(\d+)\)"), lambda sale, v: sale["store_id"] in v),
    (
        re.compile(r"EXTRACT\(DOW FROM s\.created_at\) = ANY\(\$(\d+)\)"),
        lambda sale, v: sale["created_at"].isoweekday() % 7 in v,
    ),
]
COMPLETED_FILTER = re.compile(r"\b(?:WHERE|AND) s\.sale_status_desc = 'COMPLETED'")
SERIES_BOUNDS = re.compile(r"generate_series\(\s*\$(\d+)::date,\s*\$(\d+)::date")
LIMIT = re.compile(r"LIMIT \$(\d+)")


class FakeSalesStore:
    """
    In-memory stand-in for the sales database.

    It answers the report queries by reading the predicates out of the SQL
    text and resolving each ``$n`` against the positional parameters, so a
    placeholder bound to the wrong parameter produces a wrong answer.
    """

    def __init__(self):
        self.sales: List[Dict[str, Any]] = []
        self.items: List[Dict[str, Any]] = []
        self.products: Dict[int, str] = {}
        self.stores: Dict[int, str] = {}
        self.channels: Dict[int, str] = {}
        self.calls: List[SimpleNamespace] = []

    def add_sale(self, created_at, total, channel_id=1, store_id=1, status="COMPLETED", items=()):
        sale_id = len(self.sales) + 1
        self.sales.append({
            "id": sale_id,
            "created_at": created_at,
            "total_amount": Decimal(str(total)),
            "channel_id": channel_id,
            "store_id": store_id,
            "status": status,
        })
        for product_id, quantity, price in items:
            self.items.append({
                "sale_id": sale_id,
                "product_id": product_id,
                "quantity": quantity,
                "total_price": Decimal(str(price)),
            })
        return sale_id

    async def __call__(self, query: str, params: Sequence[Any]) -> List[Dict[str, Any]]:
        params = list(params)
        self.calls.append(SimpleNamespace(query=query, params=params))

        used = [int(n) for n in PLACEHOLDER_PATTERN.findall(query)]
        assert sorted(set(used)) == list(range(1, len(params) + 1)), (used, params)

        if "generate_series" in query:
            return self._revenue_over_time(query, params)
        if "cancel_rate" in query:
            return self._kpis(query, params)
        if "product_sales" in query:
            return self._top_products(query, params)
        if "JOIN stores" in query:
            return self._store_comparison(query, params)
        if "FROM channels" in query:
            return self._lookup(self.channels)
        if "FROM stores" in query:
            return self._lookup(self.stores)
        raise AssertionError(f"Unexpected query: {query}")

    def _scope(self, query, params):
        scope = list(self.sales)
        for pattern, predicate in SALE_PREDICATES:
            for match in pattern.finditer(query):
                value = params[int(match.group(1)) - 1]
                scope = [sale for sale in scope if predicate(sale, value)]
        if COMPLETED_FILTER.search(query):
            scope = [sale for sale in scope if sale["status"] == "COMPLETED"]
        return scope

    def _kpis(self, query, params):
        scope = self._scope(query, params)
        completed = [s["total_amount"] for s in scope if s["status"] == "COMPLETED"]
        canceled = sum(1 for s in scope if s["status"] == "CANCELED")
        revenue = sum(completed, Decimal("0"))
        return [{
            "total_revenue": revenue,
            "avg_ticket": revenue / len(completed) if completed else Decimal("0"),
            "total_sales": len(completed),
            "cancel_rate": canceled / len(scope) if scope else 0.0,
        }]

    def _revenue_over_time(self, query, params):
        start_idx, end_idx = SERIES_BOUNDS.search(query).groups()
        start, end = params[int(start_idx) - 1], params[int(end_idx) - 1]

        daily = defaultdict(Decimal)
        for sale in self._scope(query, params):
            daily[sale["created_at"].date()] += sale["total_amount"]

        rows = []
        day = start
        while day <= end:
            rows.append({"date": day, "revenue": daily.get(day, Decimal("0"))})
            day += timedelta(days=1)
        return rows

    def _top_products(self, query, params):
        sale_ids = {sale["id"] for sale in self._scope(query, params)}
        sold = defaultdict(int)
        revenue = defaultdict(Decimal)
        for item in self.items:
            if item["sale_id"] in sale_ids:
                sold[item["product_id"]] += item["quantity"]
                revenue[item["product_id"]] += item["total_price"]

        limit = params[int(LIMIT.search(query).group(1)) - 1]
        ranked = sorted(revenue, key=lambda pid: (-revenue[pid], pid))[:limit]
        return [
            {"product_id": pid, "name": self.products[pid], "total_sold": sold[pid], "total_revenue": revenue[pid]}
            for pid in ranked
        ]

    def _store_comparison(self, query, params):
        totals = defaultdict(Decimal)
        for sale in self._scope(query, params):
            totals[sale["store_id"]] += sale["total_amount"]
        ranked = sorted(totals, key=lambda sid: (-totals[sid], sid))
        return [{"store_id": sid, "name": self.stores[sid], "value": totals[sid]} for sid in ranked]

    @staticmethod
    def _lookup(table):
        return [{"id": key, "name": name} for key, name in sorted(table.items(), key=lambda kv: kv[1])]


@pytest.fixture()
def store() -> FakeSalesStore:
    return FakeSalesStore()


@pytest.fixture()
def seeded_store(store) -> FakeSalesStore:
    """Two channels, two stores, a handful of sales in early January 2024."""
    store.channels.update({5: "iFood", 7: "Balcao"})
    store.stores.update({1: "Centro", 2: "Shopping"})
    store.products.update({10: "Burger", 11: "Fries", 12: "Soda"})

    store.add_sale(datetime(2024, 1, 2, 12, 30), 100, channel_id=5, store_id=1, items=[(10, 2, 80), (12, 2, 20)])
    store.add_sale(datetime(2024, 1, 2, 19, 0), 50, channel_id=7, store_id=2, items=[(11, 5, 50)])
    return store


@pytest.fixture()
def fixed_today() -> date:
    return date(2024, 3, 15)
