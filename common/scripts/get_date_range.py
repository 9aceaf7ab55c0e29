# common/scripts/get_date_range.py
from datetime import date, datetime, time, timedelta
from typing import Optional


def get_week_date_range(target_date: Optional[date] = None) -> tuple[date, date, int]:
    """
    Monday..Sunday bounds and ISO week number of the week holding ``target_date``.

    Example:
        >>> get_week_date_range(date(2024, 1, 10))
        (datetime.date(2024, 1, 8), datetime.date(2024, 1, 14), 2)
    """
    _date = target_date or date.today()
    week_start = _date - timedelta(days=_date.weekday())
    week_end = week_start + timedelta(days=6)
    return week_start, week_end, _date.isocalendar()[1]


def get_day_bounds(day: date) -> tuple[datetime, datetime]:
    """
    Half-open [start, end) datetime bounds of a calendar day.

    Used to count rows created "today" without string timestamps.
    """
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


__all__ = ["get_week_date_range", "get_day_bounds"]
