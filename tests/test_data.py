"""
Tests for roster import and schedule conversion.
"""
import pytest

from lesson_scheduler.errors import InvalidInput, RowParseError
from lesson_scheduler.models.entities import ScheduleResult, Slot, Student
from lesson_scheduler.algorithms.month_grid import build_month_slots
from lesson_scheduler.data.converter import DataConverter
from lesson_scheduler.data.roster import (
    ROSTER_TEMPLATE, RosterLoader, parse_ng_ids, parse_preferred_days, parse_roster_csv
)
from lesson_scheduler.scheduler import schedule


def result_with(year, month, placements, unassigned=()):
    """Build a result for a month with the given {(date, index): ids} placements."""
    slots = [
        Slot(date=s.date, slot_index=s.slot_index, student_ids=placements.get(s.key, ()))
        for s in build_month_slots(year, month)
    ]
    return ScheduleResult(slots=slots, unassigned=unassigned, year=year, month=month)


class TestRosterParser:
    """Test the lenient roster CSV parser."""

    def test_header_skipped(self):
        roster = parse_roster_csv("ID,Name,PreferredDays,NG\n1,Alice,1;5,2\n2,Bob,3,")
        assert [s.id for s in roster.students] == ['1', '2']
        assert roster.students[0] == Student(id='1', name='Alice', preferred_days=[1, 5], ng_with=['2'])
        assert roster.students[1].ng_with == frozenset()

    def test_no_header(self):
        roster = parse_roster_csv("1,Alice,1;5\n2,Bob")
        assert [s.name for s in roster.students] == ['Alice', 'Bob']
        assert roster.students[1].preferred_days == ()

    def test_single_field_line_dropped(self):
        roster = parse_roster_csv("ID,Name\n1,Alice,1\n42\n3,Carol,2")

        assert [s.id for s in roster.students] == ['1', '3']
        assert len(roster.skipped) == 1
        assert isinstance(roster.skipped[0], RowParseError)
        assert roster.skipped[0].line_number == 3
        assert roster.skipped[0].line == '42'

    def test_blank_id_or_name_dropped(self):
        roster = parse_roster_csv(",Alice,1\n2, ,1\n3,Carol,1")
        assert [s.id for s in roster.students] == ['3']
        assert [e.line_number for e in roster.skipped] == [1, 2]

    def test_quoted_and_messy_fields(self):
        roster = parse_roster_csv('1,Alice,"1; 5;x;12abc",\n2,Bob,"",";3; ;"\r\n\n')
        alice, bob = roster.students

        assert alice.preferred_days == (1, 5, 12)
        assert bob.preferred_days == ()
        assert bob.ng_with == frozenset({'3'})
        assert roster.skipped == []

    def test_empty_text(self):
        roster = parse_roster_csv("")
        assert roster.students == []
        assert roster.skipped == []

    def test_template_parses(self):
        roster = parse_roster_csv(ROSTER_TEMPLATE)
        first, second = roster.students

        assert first.preferred_days == (1, 5, 10)
        assert first.ng_with == frozenset({'2', '3'})
        assert second.preferred_days == (10, 15)
        assert second.ng_with == frozenset()

    def test_field_helpers(self):
        assert parse_preferred_days('"3;-1;+7"') == [3, -1, 7]
        assert parse_preferred_days('') == []
        assert parse_ng_ids('"a; b;;"') == ['a', 'b']


class TestRosterLoader:
    """Test loading a roster from disk."""

    def test_load_with_bom(self, tmp_path):
        path = tmp_path / 'roster.csv'
        path.write_text('\ufeffID,Name,Days\n1,Alice,1\n', encoding='utf-8')

        roster = RosterLoader(path).load()
        assert [s.id for s in roster.students] == ['1']

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            RosterLoader(tmp_path / 'missing.csv')


class TestScheduleExport:
    """Test converting schedules to CSV text and DataFrames."""

    students = [
        Student(id='7', name='Alice', preferred_days=[2]),
        Student(id='8', name='Bob', preferred_days=[1]),
    ]

    def test_single_filled_slot(self):
        result = result_with(2026, 4, {('2026-04-02', 2): ('7',)})
        lines = DataConverter.to_schedule_csv(result, self.students).split('\n')

        assert lines == [
            'Date,Slot,Time,Student Name,Student ID',
            '2026-04-02,3,15:00 - 16:30,"Alice",7',
        ]

    def test_rows_sorted_and_unknown_names(self):
        slots = list(reversed(result_with(2026, 4, {
            ('2026-04-03', 0): ('8',),
            ('2026-04-01', 1): ('7', 'ghost'),
        }).slots))
        result = ScheduleResult(slots=slots)

        csv_text = DataConverter.to_schedule_csv(result, self.students)
        assert csv_text == (
            'Date,Slot,Time,Student Name,Student ID\n'
            '2026-04-01,2,13:00 - 14:30,"Alice",7\n'
            '2026-04-01,2,13:00 - 14:30,Unknown,ghost\n'
            '2026-04-03,1,10:00 - 11:30,"Bob",8'
        )

    def test_empty_schedule_has_header_only(self):
        csv_text = DataConverter.to_schedule_csv(schedule(2026, 4, []), [])
        assert csv_text == 'Date,Slot,Time,Student Name,Student ID'

    def test_schedule_df(self):
        result = result_with(2026, 4, {('2026-04-01', 0): ('7', '8')})
        df = DataConverter.convert_to_schedule_df(result, self.students)

        assert list(df.columns) == ['Date', 'Slot', 'Time', 'Student Name', 'Student ID']
        assert df['Student Name'].tolist() == ['Alice', 'Bob']
        assert df['Slot'].tolist() == [1, 1]

    def test_unassigned_df(self):
        result = result_with(2026, 4, {}, unassigned=('8', 'ghost'))
        df = DataConverter.convert_unassigned_df(result, self.students)
        assert df.to_dict('records') == [
            {'Student ID': '8', 'Student Name': 'Bob'},
            {'Student ID': 'ghost', 'Student Name': 'ghost'},
        ]

    def test_utilization_report(self):
        placements = {('2026-04-01', i): tuple(str(n) for n in range(5)) for i in range(3)}
        placements[('2026-04-02', 0)] = ('a', 'b', 'c', 'd', 'e')
        report = DataConverter.generate_utilization_report(result_with(2026, 4, placements))

        assert len(report) == 22
        first, second, third = report.iloc[0], report.iloc[1], report.iloc[2]
        assert (first['Date'], first['Weekday'], first['Enrollment']) == ('2026-04-01', 'Wednesday', 15)
        assert first['Utilization'] == pytest.approx(1.0)
        assert first['Status'] == 'High'
        assert second['Status'] == 'Good'
        assert third['Status'] == 'Low'
        assert (report['Capacity'] == 15).all()

    def test_summarize(self):
        result = result_with(2026, 4, {('2026-04-01', 0): ('7', '8')}, unassigned=('9',))
        summary = DataConverter.summarize(result)

        assert summary['total_slots'] == 66
        assert summary['filled_slots'] == 1
        assert summary['assigned_students'] == 2
        assert summary['total_students'] == 3
        assert summary['average_occupancy'] == pytest.approx(round(2 / 66, 3))

    def test_filename(self):
        assert DataConverter.schedule_filename(2026, 4) == 'schedule_2026_4.csv'


class TestJsonConversion:
    """Test JSON payload conversion."""

    def test_students_from_records(self):
        students = DataConverter.students_from_records([
            {'id': 1, 'name': 'Alice', 'preferredDays': [1, '5'], 'ngWith': [2]},
            {'id': 'b', 'name': 'Bob', 'preferred_days': [3], 'ng_with': ['1']},
            {'id': 'c', 'name': ' Carol ', 'preferredDays': [2.0]},
        ])

        assert students[0] == Student(id='1', name='Alice', preferred_days=[1, 5], ng_with=['2'])
        assert students[1].preferred_days == (3,)
        assert students[2] == Student(id='c', name='Carol', preferred_days=[2])

    @pytest.mark.parametrize('payload', [
        {'id': '1'},
        [{'name': 'No id'}],
        [{'id': '1', 'name': 'A', 'preferredDays': 'monday'}],
        [{'id': '1', 'name': 'A', 'preferredDays': ['x']}],
        [{'id': '1', 'name': 'A', 'preferredDays': [1.7]}],
        [{'id': '1', 'name': 'A', 'preferredDays': [True]}],
        [{'id': '1', 'name': 'A', 'preferredDays': [None]}],
        [{'id': '1', 'name': '   '}],
        [{'id': '1'}],
        ['not a record'],
    ])
    def test_invalid_records(self, payload):
        with pytest.raises(InvalidInput):
            DataConverter.students_from_records(payload)

    def test_result_to_dict(self):
        students = [
            Student(id='1', name='Alice', preferred_days=[1]),
            Student(id='2', name='Bob'),
        ]
        data = DataConverter.result_to_dict(schedule(2026, 4, students), students)

        assert (data['year'], data['month']) == (2026, 4)
        assert data['slots'][0] == {
            'date': '2026-04-01', 'slotIndex': 0, 'time': '10:00 - 11:30', 'studentIds': ['1']
        }
        assert data['unassigned'] == ['2']
        assert data['unassignedNames'] == ['Bob']
        assert data['summary']['assigned_students'] == 1
