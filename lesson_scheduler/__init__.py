"""
Monthly lesson scheduler.

Places students into the three daily lesson slots of a month's business
days, honoring ordered day preferences, slot capacity and NG pairs.
"""
from .errors import InvalidInput, RowParseError, SchedulerError
from .models.entities import MAX_CAPACITY, TIME_LABELS, ScheduleResult, Slot, Student
from .scheduler import ScheduleService, schedule

__all__ = [
    'InvalidInput', 'RowParseError', 'SchedulerError',
    'MAX_CAPACITY', 'TIME_LABELS', 'ScheduleResult', 'Slot', 'Student',
    'ScheduleService', 'schedule',
]
