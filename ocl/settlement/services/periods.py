"""
Settlement period helpers.
"""

import calendar
from datetime import date, datetime, time, timedelta
from django.utils import timezone

from ..conf import billing_setting
from ..exceptions import ValidationException


def validate_month_year(month, year):
    """
    Coerce and check a settlement month/year pair.

    Raises:
        ValidationException: If month is not 1-12 or year is out of bounds
    """
    try:
        month = int(month)
        year = int(year)
    except (TypeError, ValueError):
        raise ValidationException("Month and year must be numbers", {"month": month, "year": year})

    if not 1 <= month <= 12:
        raise ValidationException("Month must be between 1 and 12", {"month": month})

    min_year = billing_setting('SETTLEMENT_MIN_YEAR')
    max_year = billing_setting('SETTLEMENT_MAX_YEAR')
    if not min_year <= year <= max_year:
        raise ValidationException(f"Year must be between {min_year} and {max_year}", {"year": year})
    return month, year


def month_bounds(month, year):
    """First and last calendar day of the month."""
    month, year = validate_month_year(month, year)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def current_month_bounds(today=None):
    today = today or timezone.localdate()
    last_day = calendar.monthrange(today.year, today.month)[1]
    return today.replace(day=1), today.replace(day=last_day)


def datetime_range(start_date=None, end_date=None):
    """
    Aware datetime bounds for an inclusive date range.

    Returns ``(start, end_exclusive)``; either side is ``None`` when open.
    """
    if start_date and end_date and start_date > end_date:
        raise ValidationException(
            "Start date must not be after end date",
            {"start_date": str(start_date), "end_date": str(end_date)}
        )
    start = end = None
    if start_date:
        start = timezone.make_aware(datetime.combine(start_date, time.min))
    if end_date:
        end = timezone.make_aware(datetime.combine(end_date + timedelta(days=1), time.min))
    return start, end
