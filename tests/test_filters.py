"""
Unit Tests for list filters and query building
"""
from datetime import date

import pytest

from skillswap.exceptions import InvalidFilterError
from skillswap.filters import (
    DateStyle,
    FilterState,
    TimePeriod,
    build_query,
    period_range,
)


class TestBuildQuery:
    """Test query-string parameters for one page"""

    def test_defaults_only_page_and_limit(self):
        """Default filters send just page and limit"""
        params = build_query(FilterState(), page=1, limit=20)

        assert params == {"page": "1", "limit": "20"}

    def test_status_and_search_included(self):
        """Non-default status and non-empty search are sent"""
        filters = FilterState(status="pending", search_query="refund")
        params = build_query(filters, page=3, limit=20)

        assert params["status"] == "pending"
        assert params["search"] == "refund"
        assert params["page"] == "3"

    def test_all_status_value_is_endpoint_specific(self):
        """Reports treat 'all' as the omit value while 'open' is sent"""
        assert "status" not in build_query(FilterState(status="all"), 1, 20, all_status="all")
        assert build_query(FilterState(status="open"), 1, 20, all_status="all")["status"] == "open"

    def test_period_without_date_is_ignored(self):
        """A period with no selected date sends neither period nor date"""
        filters = FilterState(time_period=TimePeriod.WEEKLY)
        params = build_query(filters, 1, 20)

        assert "period" not in params
        assert "date" not in params

    def test_overall_with_date_is_ignored(self):
        """A date with the overall period is not sent"""
        filters = FilterState(selected_date=date(2024, 5, 8))

        assert "date" not in build_query(filters, 1, 20)

    def test_period_and_date_sent_together(self):
        """Period-style endpoints receive period + ISO date"""
        filters = FilterState(time_period=TimePeriod.MONTHLY, selected_date=date(2024, 5, 8))
        params = build_query(filters, 1, 20)

        assert params["period"] == "monthly"
        assert params["date"] == "2024-05-08"

    def test_range_style_sends_start_and_end(self):
        """Range-style endpoints receive startDate/endDate instead"""
        filters = FilterState(time_period=TimePeriod.WEEKLY, selected_date=date(2024, 5, 8))
        params = build_query(filters, 1, 20, date_style=DateStyle.RANGE)

        assert params["startDate"] == "2024-05-06"
        assert params["endDate"] == "2024-05-12"
        assert "period" not in params

    def test_extra_params_passed_through(self):
        """Fixed per-screen params such as the report type are sent"""
        filters = FilterState(extra={"type": "account"})

        assert build_query(filters, 1, 20)["type"] == "account"


class TestPeriodRange:
    """Test date windows"""

    def test_daily(self):
        assert period_range(TimePeriod.DAILY, date(2024, 5, 8)) == (date(2024, 5, 8), date(2024, 5, 8))

    def test_weekly_starts_monday(self):
        """Wednesday belongs to the Monday..Sunday week around it"""
        start, end = period_range(TimePeriod.WEEKLY, date(2024, 5, 8))

        assert start == date(2024, 5, 6)
        assert start.weekday() == 0
        assert end == date(2024, 5, 12)

    def test_weekly_sunday_maps_to_previous_monday(self):
        """Sunday is the last day of its week, not the first"""
        start, end = period_range(TimePeriod.WEEKLY, date(2024, 5, 12))

        assert start == date(2024, 5, 6)
        assert end == date(2024, 5, 12)

    def test_monthly_leap_february(self):
        assert period_range(TimePeriod.MONTHLY, date(2024, 2, 10)) == (date(2024, 2, 1), date(2024, 2, 29))

    def test_monthly_december(self):
        assert period_range(TimePeriod.MONTHLY, date(2023, 12, 31)) == (date(2023, 12, 1), date(2023, 12, 31))

    def test_overall_has_no_range(self):
        assert period_range(TimePeriod.OVERALL, date(2024, 5, 8)) is None


class TestFilterMerge:
    """Test FilterState.merged"""

    def test_merge_keeps_other_fields(self):
        filters = FilterState(status="pending", search_query="abc")
        merged = filters.merged(search_query="xyz")

        assert merged.status == "pending"
        assert merged.search_query == "xyz"
        assert filters.search_query == "abc"

    def test_merge_coerces_strings(self):
        merged = FilterState().merged(time_period="weekly", selected_date="2024-05-08")

        assert merged.time_period == TimePeriod.WEEKLY
        assert merged.selected_date == date(2024, 5, 8)

    def test_search_is_trimmed(self):
        assert FilterState().merged(search_query="  bob  ").search_query == "bob"

    def test_extra_is_merged(self):
        merged = FilterState(extra={"type": "video"}).merged(extra={"type": "account"})

        assert merged.extra == {"type": "account"}

    def test_unknown_field_rejected(self):
        with pytest.raises(InvalidFilterError) as exc_info:
            FilterState().merged(colour="blue")

        assert exc_info.value.details["field"] == "colour"

    def test_invalid_period_rejected(self):
        with pytest.raises(InvalidFilterError):
            FilterState().merged(time_period="yearly")

    def test_invalid_date_rejected(self):
        with pytest.raises(InvalidFilterError):
            FilterState().merged(selected_date="08/05/2024")
