"""Issue date parsing for electronic invoices."""
from __future__ import annotations
from datetime import date, datetime
import re

# Day-first layouts used by issuers that do not emit ISO-8601
_DAY_FIRST = re.compile(r'^(\d{1,2})[/.\-](\d{1,2})[/.\-](\d{4})$')


def parse_issue_date(raw) -> datetime | None:
    """Parse a document date string to a datetime.

    Handles:
    - ISO-8601 date-times, with or without offset: "2024-05-01T10:30:00-06:00"
    - UTC designator: "2024-05-01T16:30:00Z"
    - Plain ISO dates: "2024-05-01" (midnight, naive)
    - Day-first dates: "01/05/2024", "01-05-2024", "01.05.2024"

    Returns None when the value is missing or unparseable.
    """
    if not isinstance(raw, str):
        return None
    s = raw.strip()
    if not s:
        return None

    if s.endswith(("Z", "z")):
        s = s[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(s)
    except ValueError:
        pass

    match = _DAY_FIRST.match(s)
    if match:
        day, month, year = int(match.group(1)), int(match.group(2)), int(match.group(3))
        try:
            return datetime(year, month, day)
        except ValueError:
            return None
    return None


def is_within_range(issued: datetime, start: date | datetime | None, end: date | datetime | None) -> bool:
    """Inclusive range check.

    A ``date`` bound compares calendar days; a ``datetime`` bound compares
    instants. When only one side carries an offset, both are compared as
    local wall-clock time.
    """
    if start is not None and _compare(issued, start) < 0:
        return False
    if end is not None and _compare(issued, end) > 0:
        return False
    return True


def _compare(issued: datetime, bound: date | datetime) -> int:
    if isinstance(bound, datetime):
        left, right = issued, bound
        if (left.tzinfo is None) != (right.tzinfo is None):
            left, right = left.replace(tzinfo=None), right.replace(tzinfo=None)
    else:
        left, right = issued.date(), bound
    return (left > right) - (left < right)
