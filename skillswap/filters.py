"""
List filters and query-string building
"""

from dataclasses import dataclass, field, fields, replace
from datetime import date, timedelta
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from skillswap.exceptions import InvalidFilterError


class TimePeriod(str, Enum):
    """Date window a list can be narrowed to"""
    OVERALL = "overall"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class DateStyle(str, Enum):
    """How an endpoint expects the date window on the query string"""
    PERIOD = "period"  # period=weekly&date=2024-05-08
    RANGE = "range"    # startDate=2024-05-06&endDate=2024-05-12


@dataclass(frozen=True)
class FilterState:
    """User-controlled filters for one list screen"""
    status: str = "all"
    search_query: str = ""
    time_period: TimePeriod = TimePeriod.OVERALL
    selected_date: Optional[date] = None
    extra: Dict[str, str] = field(default_factory=dict)

    @property
    def has_date_window(self) -> bool:
        return self.time_period != TimePeriod.OVERALL and self.selected_date is not None

    def merged(self, **partial: Any) -> "FilterState":
        """Return a copy with the given fields replaced, coercing strings where needed"""
        known = {f.name for f in fields(self)}
        unknown = set(partial) - known
        if unknown:
            name = sorted(unknown)[0]
            raise InvalidFilterError(f"Unknown filter field '{name}'", field=name)

        if "time_period" in partial:
            partial["time_period"] = parse_period(partial["time_period"])
        if isinstance(partial.get("selected_date"), str):
            partial["selected_date"] = parse_date(partial["selected_date"])
        if "search_query" in partial:
            partial["search_query"] = (partial["search_query"] or "").strip()
        if "extra" in partial:
            partial["extra"] = {**self.extra, **(partial["extra"] or {})}

        return replace(self, **partial)


def parse_period(value: Any) -> TimePeriod:
    try:
        return TimePeriod(value)
    except ValueError:
        allowed = ", ".join(p.value for p in TimePeriod)
        raise InvalidFilterError(
            f"Invalid time period '{value}'. Allowed: {allowed}", field="time_period"
        ) from None


def parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise InvalidFilterError(
            f"Invalid date '{value}', expected YYYY-MM-DD", field="selected_date"
        ) from None


def period_range(period: TimePeriod, selected: date) -> Optional[Tuple[date, date]]:
    """
    Inclusive (start, end) dates of the window containing `selected`.

    Weeks run Monday..Sunday; months run from the 1st to the last day.
    Returns None for OVERALL.
    """
    if period == TimePeriod.DAILY:
        return selected, selected
    if period == TimePeriod.WEEKLY:
        start = selected - timedelta(days=selected.weekday())
        return start, start + timedelta(days=6)
    if period == TimePeriod.MONTHLY:
        start = selected.replace(day=1)
        next_month = (start + timedelta(days=32)).replace(day=1)
        return start, next_month - timedelta(days=1)
    return None


def build_query(
    filters: FilterState,
    page: int,
    limit: int,
    all_status: Optional[str] = "all",
    date_style: DateStyle = DateStyle.PERIOD,
) -> Dict[str, str]:
    """Query parameters for one page of a filtered list"""
    params: Dict[str, str] = dict(filters.extra)

    if filters.status and filters.status != all_status:
        params["status"] = filters.status
    if filters.search_query:
        params["search"] = filters.search_query

    params["page"] = str(page)
    params["limit"] = str(limit)

    if filters.has_date_window:
        if date_style == DateStyle.RANGE:
            start, end = period_range(filters.time_period, filters.selected_date)
            params["startDate"] = start.isoformat()
            params["endDate"] = end.isoformat()
        else:
            params["period"] = filters.time_period.value
            params["date"] = filters.selected_date.isoformat()

    return params
