"""
Month calendar expansion.
Turns a (year, month) pair into the empty grid of business-day lesson slots.
"""
import calendar
import logging
from datetime import date
from typing import List

from ..errors import InvalidInput
from ..models.entities import Slot, SLOTS_PER_DAY

logger = logging.getLogger(__name__)


def validate_year_month(year: int, month: int) -> None:
    """
    Reject a target month that cannot produce a meaningful grid.

    Raises:
        InvalidInput: if year is not a positive integer or month is outside 1-12
    """
    if isinstance(year, bool) or not isinstance(year, int):
        raise InvalidInput(f"Year must be an integer, got {year!r}")
    if isinstance(month, bool) or not isinstance(month, int):
        raise InvalidInput(f"Month must be an integer, got {month!r}")
    if year <= 0:
        raise InvalidInput(f"Year must be positive, got {year}")
    if month < 1 or month > 12:
        raise InvalidInput(f"Month must be between 1 and 12, got {month}")


def format_date(day: date) -> str:
    return day.strftime('%Y-%m-%d')


def days_in_month(year: int, month: int) -> int:
    validate_year_month(year, month)
    return calendar.monthrange(year, month)[1]


def business_days(year: int, month: int) -> List[date]:
    """Get every Monday-Friday of the month in calendar order."""
    days = []
    for day_number in range(1, days_in_month(year, month) + 1):
        day = date(year, month, day_number)
        if day.weekday() < 5:  # 0 = Monday, 4 = Friday
            days.append(day)
    return days


def build_month_slots(year: int, month: int) -> List[Slot]:
    """
    Build the empty slot grid for a month.

    Args:
        year: Target year (positive)
        month: Target month (1-12)

    Returns:
        Slots for every business day, three per day in index order
    """
    slots = []
    for day in business_days(year, month):
        date_str = format_date(day)
        for slot_index in range(SLOTS_PER_DAY):
            slots.append(Slot(date=date_str, slot_index=slot_index))

    logger.debug(f"Built {len(slots)} slots for {year}-{month:02d}")
    return slots
