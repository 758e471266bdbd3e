"""
Data converter module.

Handles conversions between different data formats:
- Schedule results to CSV text and DataFrames
- Schedule results to JSON-ready dictionaries
- JSON roster payloads to domain objects
"""
import logging
from collections import Counter
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Sequence

import numpy as np
import pandas as pd

from ..errors import InvalidInput
from ..models.entities import (
    MAX_CAPACITY, SLOTS_PER_DAY, ScheduleResult, Slot, Student, index_students
)

logger = logging.getLogger(__name__)

SCHEDULE_COLUMNS = ['Date', 'Slot', 'Time', 'Student Name', 'Student ID']
WEEKDAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def _sorted_slots(slots: Iterable[Slot]) -> List[Slot]:
    return sorted(slots, key=lambda s: (s.date, s.slot_index))


def _pick(record: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in record and record[key] is not None:
            return record[key]
    return default


def _to_day_number(value: Any) -> int:
    """Convert a JSON preferred day to an int, refusing bools and fractional numbers."""
    if isinstance(value, bool):
        raise ValueError(f"{value!r} is not a day number")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"{value!r} is not a whole day number")
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        return int(value.strip())
    raise TypeError(f"{value!r} is not a day number")


class DataConverter:
    """
    Converts between different data representations used in the system.

    Responsibilities:
    - Convert schedule results to CSV text for download
    - Convert schedule results to DataFrames for reports
    - Convert API payloads to domain model objects and back
    """

    @staticmethod
    def schedule_filename(year: int, month: int) -> str:
        return f"schedule_{year}_{month}.csv"

    @staticmethod
    def to_schedule_csv(result: ScheduleResult, students: Sequence[Student]) -> str:
        """
        Convert a schedule to CSV text, one row per placed student.

        Args:
            result: ScheduleResult to export
            students: Roster used to resolve student names

        Returns:
            CSV text with columns Date, Slot, Time, Student Name, Student ID
        """
        students_by_id = index_students(students)
        rows = [','.join(SCHEDULE_COLUMNS)]

        for slot in _sorted_slots(result.slots):
            for student_id in slot.student_ids:
                student = students_by_id.get(student_id)
                rows.append(','.join([
                    slot.date,
                    str(slot.slot_index + 1),
                    slot.time_label,
                    f'"{student.name}"' if student else 'Unknown',
                    student_id
                ]))

        return '\n'.join(rows)

    @staticmethod
    def convert_to_schedule_df(result: ScheduleResult, students: Sequence[Student]) -> pd.DataFrame:
        """
        Convert a schedule to a DataFrame, one row per placed student.

        Returns:
            DataFrame with columns: Date, Slot, Time, Student Name, Student ID
        """
        students_by_id = index_students(students)
        rows = []

        for slot in _sorted_slots(result.slots):
            for student_id in slot.student_ids:
                student = students_by_id.get(student_id)
                rows.append({
                    'Date': slot.date,
                    'Slot': slot.slot_index + 1,
                    'Time': slot.time_label,
                    'Student Name': student.name if student else 'Unknown',
                    'Student ID': student_id
                })

        return pd.DataFrame(rows, columns=SCHEDULE_COLUMNS)

    @staticmethod
    def convert_unassigned_df(result: ScheduleResult, students: Sequence[Student]) -> pd.DataFrame:
        """
        Convert the unassigned list to a DataFrame.

        Returns:
            DataFrame with columns: Student ID, Student Name
        """
        students_by_id = index_students(students)
        rows = []

        for student_id in result.unassigned:
            student = students_by_id.get(student_id)
            rows.append({
                'Student ID': student_id,
                'Student Name': student.name if student else student_id
            })

        return pd.DataFrame(rows, columns=['Student ID', 'Student Name'])

    @staticmethod
    def generate_utilization_report(result: ScheduleResult) -> pd.DataFrame:
        """
        Generate a report on daily slot utilization.

        Args:
            result: ScheduleResult object

        Returns:
            DataFrame with one row per business day
        """
        enrollment_by_date = Counter()
        for slot in result.slots:
            enrollment_by_date[slot.date] += len(slot.student_ids)

        day_capacity = SLOTS_PER_DAY * MAX_CAPACITY
        dates = sorted(enrollment_by_date)
        enrollment = np.array([enrollment_by_date[d] for d in dates], dtype=float)
        utilization = enrollment / day_capacity if day_capacity > 0 else np.zeros_like(enrollment)

        report = []
        for date_str, count, ratio in zip(dates, enrollment, utilization):
            report.append({
                'Date': date_str,
                'Weekday': WEEKDAY_NAMES[date.fromisoformat(date_str).weekday()],
                'Enrollment': int(count),
                'Capacity': day_capacity,
                'Utilization': round(float(ratio), 3),
                'Status': 'Low' if ratio < 0.3 else
                        'High' if ratio > 0.9 else 'Good'
            })

        return pd.DataFrame(report, columns=['Date', 'Weekday', 'Enrollment',
                                             'Capacity', 'Utilization', 'Status'])

    @staticmethod
    def summarize(result: ScheduleResult) -> Dict[str, Any]:
        """Compute headline numbers for a schedule."""
        occupancy = np.array([len(slot.student_ids) for slot in result.slots], dtype=float)
        total_students = result.assigned_count + len(result.unassigned)

        return {
            'total_slots': len(result.slots),
            'filled_slots': int(np.count_nonzero(occupancy)),
            'assigned_students': result.assigned_count,
            'unassigned_students': len(result.unassigned),
            'total_students': total_students,
            'average_occupancy': round(float(occupancy.mean()), 3) if occupancy.size else 0.0
        }

    @staticmethod
    def slot_to_dict(slot: Slot) -> Dict[str, Any]:
        return {
            'date': slot.date,
            'slotIndex': slot.slot_index,
            'time': slot.time_label,
            'studentIds': list(slot.student_ids)
        }

    @staticmethod
    def student_to_dict(student: Student) -> Dict[str, Any]:
        return {
            'id': student.id,
            'name': student.name,
            'preferredDays': list(student.preferred_days),
            'ngWith': sorted(student.ng_with)
        }

    @classmethod
    def result_to_dict(cls, result: ScheduleResult,
                       students: Optional[Sequence[Student]] = None) -> Dict[str, Any]:
        """
        Convert a schedule to a JSON-ready dictionary.

        Unassigned students are listed with their names when a roster is given.
        """
        students_by_id = index_students(students or [])
        return {
            'year': result.year,
            'month': result.month,
            'slots': [cls.slot_to_dict(slot) for slot in result.slots],
            'unassigned': list(result.unassigned),
            'unassignedNames': [
                students_by_id[sid].name if sid in students_by_id else sid
                for sid in result.unassigned
            ],
            'summary': cls.summarize(result)
        }

    @staticmethod
    def students_from_records(records: Any) -> List[Student]:
        """
        Convert a JSON roster payload to Student objects.

        Accepts both camelCase (preferredDays, ngWith) and snake_case keys.

        Raises:
            InvalidInput: if the payload is not a list of valid student records
        """
        if not isinstance(records, list):
            raise InvalidInput("Students must be a list")

        students = []
        for position, record in enumerate(records):
            if not isinstance(record, dict):
                raise InvalidInput(f"Student record {position} must be an object")

            student_id = _pick(record, 'id')
            name = _pick(record, 'name', default='')
            if student_id is None or str(student_id).strip() == '':
                raise InvalidInput(f"Student record {position} has no id")
            if str(name).strip() == '':
                raise InvalidInput(f"Student record {position} has no name")

            preferred_days = _pick(record, 'preferredDays', 'preferred_days', default=[])
            ng_with = _pick(record, 'ngWith', 'ng_with', default=[])
            if not isinstance(preferred_days, list) or not isinstance(ng_with, list):
                raise InvalidInput(f"Student record {position} has malformed preferences")

            try:
                days = [_to_day_number(d) for d in preferred_days]
            except (TypeError, ValueError):
                raise InvalidInput(f"Student record {position} has a non-integer preferred day")

            students.append(Student(
                id=str(student_id).strip(),
                name=str(name).strip(),
                preferred_days=days,
                ng_with=[str(n) for n in ng_with]
            ))

        return students
