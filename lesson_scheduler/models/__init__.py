from .entities import MAX_CAPACITY, SLOTS_PER_DAY, TIME_LABELS, Student, Slot, ScheduleResult

__all__ = ['MAX_CAPACITY', 'SLOTS_PER_DAY', 'TIME_LABELS', 'Student', 'Slot', 'ScheduleResult']
