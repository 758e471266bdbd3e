"""
Entity models for the lesson scheduling system.
These classes represent the core domain objects used in the scheduling process.
"""
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple

# Maximum number of students that can share a single lesson slot
MAX_CAPACITY = 5

# Fixed daily lesson windows, indexed by slot index
TIME_LABELS = ("10:00 - 11:30", "13:00 - 14:30", "15:00 - 16:30")
SLOTS_PER_DAY = len(TIME_LABELS)


@dataclass(frozen=True)
class Student:
    """
    Represents a student with their ordered day preferences and incompatibilities.

    `preferred_days` holds day-of-month numbers in priority order (first entry
    is tried first). `ng_with` holds ids of students this student must never
    share a slot with.
    """
    id: str
    name: str
    preferred_days: Tuple[int, ...] = ()
    ng_with: FrozenSet[str] = frozenset()

    def __post_init__(self):
        # Accept lists and sets from callers, store immutable copies
        object.__setattr__(self, 'preferred_days', tuple(self.preferred_days))
        object.__setattr__(self, 'ng_with', frozenset(self.ng_with))

    @property
    def preference_count(self) -> int:
        return len(self.preferred_days)

    def conflicts_with(self, other: 'Student') -> bool:
        """Check if either student has declared the other as NG."""
        return other.id in self.ng_with or self.id in other.ng_with


@dataclass(frozen=True)
class Slot:
    """Represents one lesson window on a business day."""
    date: str  # YYYY-MM-DD
    slot_index: int  # 0, 1, 2
    student_ids: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'student_ids', tuple(self.student_ids))

    @property
    def key(self) -> Tuple[str, int]:
        return (self.date, self.slot_index)

    @property
    def time_label(self) -> str:
        return TIME_LABELS[self.slot_index]

    @property
    def is_full(self) -> bool:
        """Check if slot is at full capacity."""
        return len(self.student_ids) >= MAX_CAPACITY

    def __str__(self) -> str:
        return f"{self.date} #{self.slot_index + 1} ({self.time_label})"


@dataclass(frozen=True)
class ScheduleResult:
    """Represents a complete month schedule: every slot plus unplaced students."""
    slots: Tuple[Slot, ...]
    unassigned: Tuple[str, ...] = ()
    year: Optional[int] = None
    month: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, 'slots', tuple(self.slots))
        object.__setattr__(self, 'unassigned', tuple(self.unassigned))

    @property
    def assigned_count(self) -> int:
        """Get the number of placed students."""
        return sum(len(slot.student_ids) for slot in self.slots)

    def slots_for_date(self, date: str) -> List[Slot]:
        """Get the slots of a single day in index order."""
        return [slot for slot in self.slots if slot.date == date]

    def slot_for_student(self, student_id: str) -> Optional[Slot]:
        """Get the slot a student was placed in, if any."""
        for slot in self.slots:
            if student_id in slot.student_ids:
                return slot
        return None


def index_students(students: Iterable[Student]) -> Dict[str, Student]:
    """Map student ids to students. The first occurrence of a duplicated id wins."""
    by_id = {}
    for student in students:
        by_id.setdefault(student.id, student)
    return by_id
