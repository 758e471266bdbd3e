"""
Main scheduling service module.

This module provides the lesson scheduling engine entry point and the
service that orchestrates loading a roster, running the engine, and
saving the results.
"""
import logging
import time
from collections import Counter
from pathlib import Path
from typing import Any, Dict, List, Sequence

from .algorithms.greedy import assign_students, finalize_schedule, prioritize_students
from .algorithms.month_grid import build_month_slots, validate_year_month
from .data.converter import DataConverter
from .data.roster import RosterLoader, RosterParseResult
from .models.entities import ScheduleResult, Student, index_students

logger = logging.getLogger(__name__)


def schedule(year: int, month: int, students: Sequence[Student]) -> ScheduleResult:
    """
    Assign students to the lesson slots of a month.

    Args:
        year: Target year (positive)
        month: Target month (1-12)
        students: Roster to place

    Returns:
        Immutable ScheduleResult with every slot of the month and the unplaced students

    Raises:
        InvalidInput: if year or month is invalid
    """
    validate_year_month(year, month)
    students = list(students)

    duplicates = [sid for sid, count in Counter(s.id for s in students).items() if count > 1]
    if duplicates:
        logger.warning(f"Duplicate student ids in roster: {duplicates}")

    slot_grid = build_month_slots(year, month)
    prioritized = prioritize_students(students)
    filled_grid, unassigned = assign_students(
        prioritized, slot_grid, index_students(students), year, month
    )

    if unassigned:
        logger.warning(f"{len(unassigned)} students could not be placed: {unassigned}")

    return finalize_schedule(filled_grid, unassigned, year=year, month=month)


class ScheduleService:
    """
    Main lesson scheduling service.

    This class is responsible for:
    - Loading the student roster
    - Running the scheduling engine
    - Generating and saving results
    """

    def __init__(self, roster_path: str, output_dir: str):
        """
        Initialize the scheduling service.

        Args:
            roster_path: Path to the roster CSV file
            output_dir: Directory where output CSV files will be saved
        """
        self.roster_path = Path(roster_path)
        self.output_dir = Path(output_dir)

        # Create output directory if it doesn't exist
        if not self.output_dir.exists():
            self.output_dir.mkdir(parents=True, exist_ok=True)

        self.converter = DataConverter()

        # Initialize run metrics
        self.metrics = {
            'load_time': 0,
            'scheduling_time': 0,
            'total_time': 0
        }

    def load_roster(self) -> RosterParseResult:
        """
        Load the roster file.

        Returns:
            Parsed roster with skipped-line diagnostics
        """
        start_time = time.time()
        logger.info(f"Loading roster from {self.roster_path}")

        try:
            roster = RosterLoader(self.roster_path).load()

            self.metrics['load_time'] = time.time() - start_time
            logger.info(f"Roster loaded in {self.metrics['load_time']:.2f} seconds")

            return roster
        except Exception as e:
            logger.error(f"Error loading roster: {str(e)}")
            raise

    def run_schedule(self, year: int, month: int, students: List[Student]) -> ScheduleResult:
        """Run the scheduling engine and record its duration."""
        start_time = time.time()
        logger.info(f"Scheduling {len(students)} students for {year}-{month:02d}")

        result = schedule(year, month, students)

        self.metrics['scheduling_time'] = time.time() - start_time
        logger.info(f"Scheduling completed in {self.metrics['scheduling_time']:.2f} seconds")

        return result

    def save_results(self, result: ScheduleResult, students: List[Student]) -> Dict[str, str]:
        """
        Save schedule results to CSV files.

        Args:
            result: ScheduleResult to save
            students: Roster used to resolve names

        Returns:
            Dictionary of output file paths
        """
        logger.info(f"Saving results to {self.output_dir}")

        output_files = {
            'schedule': str(self.output_dir / self.converter.schedule_filename(result.year, result.month)),
            'schedule_table': str(self.output_dir / 'Schedule_Table.csv'),
            'unassigned': str(self.output_dir / 'Unassigned_Students.csv'),
            'utilization_report': str(self.output_dir / 'Utilization_Report.csv')
        }

        Path(output_files['schedule']).write_text(
            self.converter.to_schedule_csv(result, students), encoding='utf-8'
        )
        self.converter.convert_to_schedule_df(result, students).to_csv(
            output_files['schedule_table'], index=False
        )
        self.converter.convert_unassigned_df(result, students).to_csv(
            output_files['unassigned'], index=False
        )
        self.converter.generate_utilization_report(result).to_csv(
            output_files['utilization_report'], index=False
        )

        logger.info("Results saved successfully")

        return output_files

    def run(self, year: int, month: int) -> Dict[str, Any]:
        """
        Run the complete scheduling process.

        Args:
            year: Target year
            month: Target month

        Returns:
            Dictionary containing results and metrics
        """
        total_start_time = time.time()
        logger.info("Starting complete scheduling process")

        try:
            roster = self.load_roster()
            result = self.run_schedule(year, month, roster.students)
            output_files = self.save_results(result, roster.students)

            self.metrics['total_time'] = time.time() - total_start_time
            students_by_id = index_students(roster.students)

            results = {
                'schedule_summary': self.converter.summarize(result),
                'unassigned': [
                    {'id': sid, 'name': students_by_id[sid].name if sid in students_by_id else sid}
                    for sid in result.unassigned
                ],
                'skipped_lines': [e.to_dict() for e in roster.skipped],
                'output_files': output_files,
                'metrics': self.metrics,
                'success': True
            }

            logger.info(f"Scheduling completed successfully in {self.metrics['total_time']:.2f} seconds")

            return results

        except Exception as e:
            logger.error(f"Scheduling failed: {str(e)}")

            self.metrics['total_time'] = time.time() - total_start_time

            return {
                'error': str(e),
                'metrics': self.metrics,
                'success': False
            }
