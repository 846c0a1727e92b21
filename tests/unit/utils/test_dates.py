"""Test issue date parsing and range checks."""
from datetime import date, datetime, timedelta, timezone

import pytest
from invoice_tax.utils.dates import is_within_range, parse_issue_date

CR = timezone(timedelta(hours=-6))


class TestParseIssueDate:
    def test_iso_offset(self):
        assert parse_issue_date("2024-05-01T10:30:00-06:00") == datetime(2024, 5, 1, 10, 30, tzinfo=CR)

    def test_utc_designator(self):
        assert parse_issue_date("2024-05-01T16:30:00Z") == datetime(2024, 5, 1, 16, 30, tzinfo=timezone.utc)

    def test_plain_date(self):
        assert parse_issue_date("2024-05-01") == datetime(2024, 5, 1)

    @pytest.mark.parametrize("raw", ["01/05/2024", "01-05-2024", "01.05.2024", "1/5/2024"])
    def test_day_first(self, raw):
        assert parse_issue_date(raw) == datetime(2024, 5, 1)

    @pytest.mark.parametrize("raw", [None, "", "mañana", "31/02/2024", {"x": "1"}])
    def test_unparseable(self, raw):
        assert parse_issue_date(raw) is None


class TestIsWithinRange:
    def test_date_bounds_inclusive(self):
        issued = datetime(2024, 5, 31, 23, 59, tzinfo=CR)
        assert is_within_range(issued, date(2024, 5, 1), date(2024, 5, 31))

    def test_before_start(self):
        assert not is_within_range(datetime(2024, 4, 30, 12), date(2024, 5, 1), None)

    def test_after_end(self):
        assert not is_within_range(datetime(2024, 6, 1), None, date(2024, 5, 31))

    def test_datetime_bounds_compare_instants(self):
        issued = datetime(2024, 5, 1, 10, 0, tzinfo=CR)
        assert is_within_range(issued, datetime(2024, 5, 1, 16, 0, tzinfo=timezone.utc), None)
        assert not is_within_range(issued, datetime(2024, 5, 1, 16, 1, tzinfo=timezone.utc), None)

    def test_naive_bound_uses_wall_clock(self):
        issued = datetime(2024, 5, 1, 10, 0, tzinfo=CR)
        assert is_within_range(issued, datetime(2024, 5, 1, 10, 0), datetime(2024, 5, 1, 10, 0))

    def test_no_bounds(self):
        assert is_within_range(datetime(1999, 1, 1), None, None)
