"""
Greedy algorithm implementation for monthly lesson scheduling.
This module provides a fast, single-pass approach to place students into slots.
"""
import logging
import time
from collections import defaultdict
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple

from ..models.entities import MAX_CAPACITY, ScheduleResult, Slot, Student
from .month_grid import days_in_month, format_date

# Configure logger
logger = logging.getLogger(__name__)

# Treat an empty preference list as the least constrained possible
UNBOUNDED_PREFERENCES = float('inf')


def _preference_key(student: Student) -> float:
    return student.preference_count or UNBOUNDED_PREFERENCES


def prioritize_students(students: Sequence[Student]) -> List[Student]:
    """
    Order students so the hardest to place are processed first.

    Students with fewer preferred days have fewer candidate slots, so they go
    first. Students without any preferred day go last. The sort is stable:
    ties keep their input order.
    """
    return sorted(students, key=_preference_key)


class GreedyAssigner:
    """
    Implements the greedy slot assignment.

    Each student, in the order given, is placed on the first slot that has
    room and holds no NG partner, walking preferred days in the student's own
    order and the slots of each day in index order. A placement is never
    revisited.
    """

    def __init__(self,
                 slot_grid: Sequence[Slot],
                 students_by_id: Dict[str, Student],
                 year: int,
                 month: int):
        """
        Initialize the assigner with the empty grid.

        Args:
            slot_grid: Slots for the month, as built by build_month_slots
            students_by_id: Every known student, used for NG lookups of occupants
            year: Target year
            month: Target month
        """
        self.slot_grid = list(slot_grid)
        self.students_by_id = students_by_id
        self.year = year
        self.month = month
        self.days_in_month = days_in_month(year, month)

        # Occupancy tracking
        self.slot_occupants = {}  # (date, slot_index) -> [student_id, ...]
        self.date_to_slots = defaultdict(list)  # date -> [Slot, ...] in index order
        self.unassigned = []

        self._preprocess_grid()

    def _preprocess_grid(self) -> None:
        for slot in self.slot_grid:
            self.slot_occupants[slot.key] = list(slot.student_ids)
            self.date_to_slots[slot.date].append(slot)

        for day_slots in self.date_to_slots.values():
            day_slots.sort(key=lambda s: s.slot_index)

    def _date_for_day(self, day_number: int) -> Optional[str]:
        """Get the date string for a day of the target month, or None if the day does not exist."""
        if isinstance(day_number, bool) or not isinstance(day_number, int):
            return None
        if day_number < 1 or day_number > self.days_in_month:
            return None
        return format_date(date(self.year, self.month, day_number))

    def _has_conflict(self, student: Student, occupant_ids: List[str]) -> bool:
        """
        Check whether any current occupant is an NG partner of the student.

        The relationship is checked in both directions. An NG id that matches
        nobody is simply never hit.
        """
        for occupant_id in occupant_ids:
            occupant = self.students_by_id.get(occupant_id)
            if occupant is None:
                # Only the placing student's own declaration can apply
                if occupant_id in student.ng_with:
                    return True
            elif student.conflicts_with(occupant):
                return True
        return False

    def _can_place(self, student: Student, slot: Slot) -> bool:
        occupants = self.slot_occupants[slot.key]
        if len(occupants) >= MAX_CAPACITY:
            return False
        return not self._has_conflict(student, occupants)

    def find_slot(self, student: Student) -> Optional[Slot]:
        """
        Find the first slot the student can take.

        Args:
            student: Student to place

        Returns:
            The slot to use, or None if no preferred day has an eligible slot
        """
        for day_number in student.preferred_days:
            date_str = self._date_for_day(day_number)
            if date_str is None or date_str not in self.date_to_slots:
                logger.debug(f"Student {student.id}: day {day_number} has no slots, skipping")
                continue

            for slot in self.date_to_slots[date_str]:
                if self._can_place(student, slot):
                    return slot

        return None

    def assign(self, prioritized_students: Sequence[Student]) -> List[str]:
        """
        Place students one by one in the order given.

        Args:
            prioritized_students: Students in processing order

        Returns:
            Ids of students that could not be placed, in processing order
        """
        start_time = time.time()
        logger.info(f"Starting greedy assignment of {len(prioritized_students)} students")

        for student in prioritized_students:
            slot = self.find_slot(student)
            if slot is None:
                self.unassigned.append(student.id)
                logger.debug(f"Could not place student {student.id}")
                continue

            self.slot_occupants[slot.key].append(student.id)
            logger.debug(f"Assigned student {student.id} to slot {slot}")

        placed = len(prioritized_students) - len(self.unassigned)
        logger.info(f"Placed {placed}/{len(prioritized_students)} students "
                    f"in {time.time() - start_time:.3f} seconds")
        return self.unassigned

    def filled_grid(self) -> List[Slot]:
        """Build new Slot objects carrying the current occupants."""
        return [
            Slot(date=slot.date,
                 slot_index=slot.slot_index,
                 student_ids=tuple(self.slot_occupants[slot.key]))
            for slot in self.slot_grid
        ]


def assign_students(prioritized_students: Sequence[Student],
                    slot_grid: Sequence[Slot],
                    students_by_id: Dict[str, Student],
                    year: int,
                    month: int) -> Tuple[List[Slot], List[str]]:
    """
    Run the greedy assignment over a slot grid.

    Returns:
        Tuple of (filled slot grid, unassigned student ids)
    """
    assigner = GreedyAssigner(slot_grid, students_by_id, year, month)
    unassigned = assigner.assign(prioritized_students)
    return assigner.filled_grid(), unassigned


def finalize_schedule(slot_grid: Sequence[Slot],
                      unassigned: Sequence[str],
                      year: Optional[int] = None,
                      month: Optional[int] = None) -> ScheduleResult:
    """Package the filled grid and unplaced students into an immutable result."""
    return ScheduleResult(slots=tuple(slot_grid), unassigned=tuple(unassigned),
                          year=year, month=month)
