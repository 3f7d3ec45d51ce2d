from datetime import date, datetime, time

from dateutil.relativedelta import MO, relativedelta


def add_frequency(d: date, frequency) -> date:
    """Advance a due date by one period of ``frequency``.

    Month-end overflow clamps to the last day of the target month
    (Jan 31 + 1 month -> Feb 29 in a leap year).
    """
    return d + relativedelta(months=frequency.months)


def start_of_day(d: date) -> datetime:
    return datetime.combine(d, time.min)


def as_moment(value) -> datetime:
    """Treat a bare date as midnight of that day."""
    if isinstance(value, datetime):
        return value
    return start_of_day(value)


def is_due(occurrence: date, now) -> bool:
    """An occurrence is due once ``now`` is strictly past midnight of its date."""
    return start_of_day(occurrence) < as_moment(now)


def days_between(later: date, earlier: date) -> int:
    return (later - earlier).days


def whole_months_between(later: date, earlier: date) -> int:
    delta = relativedelta(later, earlier)
    return delta.years * 12 + delta.months


def period_bounds(period: str, today: date):
    """First and last day of the calendar ``period`` containing ``today``.

    Weeks start on Monday.
    """
    if period == "day":
        return today, today
    if period == "week":
        start = today + relativedelta(weekday=MO(-1))
        return start, start + relativedelta(days=6)
    if period == "month":
        start = today.replace(day=1)
        return start, start + relativedelta(months=1, days=-1)
    if period == "year":
        return date(today.year, 1, 1), date(today.year, 12, 31)
    raise ValueError(f"Unknown report period: {period}")
