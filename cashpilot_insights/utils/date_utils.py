"""Date manipulation utilities"""

from datetime import date, datetime, timedelta
from typing import Iterable, List


def period_key(day: date) -> str:
    """Calendar month bucket used for every per-period aggregate (YYYY-MM)"""
    return f"{day.year:04d}-{day.month:02d}"


def days_before(as_of: date, days: int) -> date:
    """Date `days` days before `as_of`"""
    return as_of - timedelta(days=days)


def resolve_as_of(as_of: date | None) -> date:
    """Analysis reference date (default: today)"""
    return as_of if as_of is not None else date.today()


def to_date(value: date | datetime) -> date:
    """Normalize order timestamps and transaction dates to plain dates"""
    if isinstance(value, datetime):
        return value.date()
    return value


def previous_month_range(as_of: date) -> tuple[date, date]:
    """First day of the previous calendar month and first day of the current one"""
    this_month = as_of.replace(day=1)
    last_month = (this_month - timedelta(days=1)).replace(day=1)
    return last_month, this_month


def sorted_periods(*period_maps: Iterable[str]) -> List[str]:
    """Union of period keys across maps, in chronological order"""
    keys = set()
    for period_map in period_maps:
        keys.update(period_map)
    return sorted(keys)
