"""
WHERE-clause composition with positional ``$n`` placeholders.

Values never enter the query text: every value is appended to a parameter
list and only its placeholder is written into the SQL. Fragments built
independently (each numbered from ``$1``) are joined with
``merge_clauses``, which renumbers the later ones so the final query reads
``$1 .. $N`` in the same order as the merged parameter list.
"""

import re
from datetime import datetime, time
from typing import Any, List, NamedTuple, Tuple

from sales_reports.models.reports import FilterSet

PLACEHOLDER_PATTERN = re.compile(r"\$(\d+)")
_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

END_OF_DAY = time(23, 59, 59)


class WhereClause(NamedTuple):
    """Predicate fragments paired by position with their bound parameters."""

    fragments: Tuple[str, ...]
    params: Tuple[Any, ...]
    next_index: int

    @property
    def start_index(self) -> int:
        return self.next_index - len(self.params)

    def conditions(self, *extra: str) -> List[str]:
        """Fragments followed by any fixed (parameterless) predicates."""
        return [*self.fragments, *extra]

    def sql(self, *extra: str) -> str:
        """Render ``WHERE a AND b``, or an empty string when nothing applies."""
        conditions = self.conditions(*extra)
        if not conditions:
            return ""
        return "WHERE " + " AND ".join(conditions)

    def shifted(self, by: int) -> "WhereClause":
        """Same clause with every placeholder moved up by `by`."""
        return WhereClause(
            tuple(shift_placeholders(fragment, by) for fragment in self.fragments),
            self.params,
            self.next_index + by,
        )


class ClauseBuilder:
    """Tracks the placeholder counter and the parallel fragment/parameter lists."""

    def __init__(self, start_index: int = 1):
        if start_index < 1:
            raise ValueError(f"Placeholder numbering starts at 1, got {start_index}")
        self._next_index = start_index
        self._fragments: List[str] = []
        self._params: List[Any] = []

    @property
    def next_index(self) -> int:
        return self._next_index

    def bind(self, value: Any) -> str:
        """Append a parameter and return the placeholder standing in for it."""
        placeholder = f"${self._next_index}"
        self._params.append(value)
        self._next_index += 1
        return placeholder

    def add(self, template: str, value: Any) -> "ClauseBuilder":
        """Add one predicate; ``{}`` in the template receives the placeholder."""
        self._fragments.append(template.format(self.bind(value)))
        return self

    def build(self) -> WhereClause:
        return WhereClause(tuple(self._fragments), tuple(self._params), self._next_index)


def build_where_clause(filters: FilterSet, alias: str = "s", start_index: int = 1) -> WhereClause:
    """
    Translate a FilterSet into predicates over the sales table ``alias``.

    Fixed order: start date, end date, channels, stores, weekday. Each
    set-valued dimension binds its whole list to a single ``ANY($n)``.
    """
    if not _IDENTIFIER.match(alias):
        raise ValueError(f"Invalid table alias: {alias!r}")

    builder = ClauseBuilder(start_index)

    if filters.start_date:
        builder.add(f"{alias}.created_at >= {{}}", datetime.combine(filters.start_date, time.min))
    if filters.end_date:
        builder.add(f"{alias}.created_at <= {{}}", datetime.combine(filters.end_date, END_OF_DAY))
    if filters.channel_ids:
        builder.add(f"{alias}.channel_id = ANY({{}})", list(filters.channel_ids))
    if filters.store_ids:
        builder.add(f"{alias}.store_id = ANY({{}})", list(filters.store_ids))
    if filters.day_of_week:
        builder.add(f"EXTRACT(DOW FROM {alias}.created_at) = ANY({{}})", list(filters.day_of_week))

    return builder.build()


def shift_placeholders(text: str, by: int) -> str:
    """Rewrite every ``$n`` in ``text`` to ``$(n + by)``; nothing else changes."""
    if by == 0:
        return text
    return PLACEHOLDER_PATTERN.sub(lambda match: f"${int(match.group(1)) + by}", text)


def merge_clauses(*clauses: WhereClause) -> WhereClause:
    """
    Concatenate independently numbered clauses into one.

    Each clause is shifted so that it continues where the previous one
    stopped; parameters are concatenated in argument order.
    """
    fragments: List[str] = []
    params: List[Any] = []

    for clause in clauses:
        shifted = clause.shifted(len(params) + 1 - clause.start_index)
        fragments.extend(shifted.fragments)
        params.extend(clause.params)

    return WhereClause(tuple(fragments), tuple(params), len(params) + 1)
