"""Date and money arithmetic shared by the domain layer"""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal, ROUND_HALF_UP


def add_days(from_date: date, days: int) -> date:
    return from_date + timedelta(days=days)


def inclusive_day_count(start: date, end: date) -> int:
    """Number of calendar days in [start, end]; zero or negative when end precedes start"""
    return (end - start).days + 1


def month_start(moment: datetime, months_back: int = 0) -> datetime:
    """Midnight on the first day of the month `months_back` months before `moment`"""
    month_index = moment.year * 12 + (moment.month - 1) - months_back
    return datetime(month_index // 12, month_index % 12 + 1, 1)


def round_currency(value: float) -> float:
    """Round half-up to cents (Python's round() is half-to-even)"""
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def to_naive_utc(moment: datetime) -> datetime:
    """Offset-aware times become naive UTC; naive times pass through unchanged"""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(timezone.utc).replace(tzinfo=None)
