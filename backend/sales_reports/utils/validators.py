import re
from datetime import date, datetime
from typing import Any, Iterable, List, Optional

from sales_reports.utils.exceptions import ValidationError

_INT_TOKEN = re.compile(r"^[+-]?\d+$")
_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# Ids are int4 columns in the sales database
MAX_ID = 2**31 - 1


def _invalid(field: str, value: Any, reason: str) -> ValidationError:
    return ValidationError(
        f"Invalid value for '{field}': {reason}",
        details={"field": field, "value": value if isinstance(value, (str, int)) else repr(value)},
    )


def parse_calendar_date(field: str, value: Any) -> Optional[date]:
    """Parse an ISO ``YYYY-MM-DD`` calendar date; empty input means absent."""

    if value is None:
        return None
    if isinstance(value, datetime):
        raise _invalid(field, value, "expected a calendar date without time of day")
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise _invalid(field, value, "expected a date string in YYYY-MM-DD format")

    text = value.strip()
    if not text:
        return None
    if not _ISO_DATE.match(text):
        raise _invalid(field, value, "expected a date string in YYYY-MM-DD format")
    try:
        return date.fromisoformat(text)
    except ValueError:
        raise _invalid(field, value, "expected a date string in YYYY-MM-DD format") from None


def _tokens(field: str, value: Any) -> Iterable[Any]:
    # A lone scalar, a comma-joined string, or a list of either (repeated query params)
    items = value if isinstance(value, (list, tuple, set, frozenset)) else [value]
    for item in items:
        if isinstance(item, str):
            if not item.strip():
                if len(items) == 1:
                    continue
                raise _invalid(field, value, "empty list element")
            yield from item.split(",")
        else:
            yield item


def parse_int_set(
    field: str,
    value: Any,
    minimum: Optional[int] = None,
    maximum: Optional[int] = None,
) -> List[int]:
    """
    Normalize a loosely typed integer set.

    Accepts ``None``, a single integer, a comma-joined string such as
    ``"1,2,3"`` or a list of those. Order of first occurrence is kept and
    duplicates are dropped.
    """

    if value is None:
        return []

    result: List[int] = []
    seen = set()
    for token in _tokens(field, value):
        if isinstance(token, bool):
            raise _invalid(field, value, "booleans are not integers")
        if isinstance(token, int):
            number = token
        elif isinstance(token, str) and _INT_TOKEN.match(token.strip()):
            number = int(token.strip())
        else:
            raise _invalid(field, value, f"'{token}' is not an integer")

        if minimum is not None and number < minimum:
            raise _invalid(field, value, f"{number} is below the minimum of {minimum}")
        if maximum is not None and number > maximum:
            raise _invalid(field, value, f"{number} is above the maximum of {maximum}")
        if number not in seen:
            seen.add(number)
            result.append(number)

    return result
