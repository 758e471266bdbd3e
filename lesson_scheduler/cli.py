#!/usr/bin/env python3
"""
Command-line interface for the lesson scheduler.
Provides a simple way to build a month's lesson roster from the command line.
"""
import argparse
import datetime
import json
import logging
import sys
from pathlib import Path

from .data.roster import roster_template
from .scheduler import ScheduleService


def parse_args(argv=None):
    """Parse command-line arguments."""
    today = datetime.date.today()
    parser = argparse.ArgumentParser(
        description='Monthly Lesson Scheduler CLI',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    parser.add_argument(
        '--roster',
        type=str,
        default='students.csv',
        help='Roster CSV file (ID, Name, PreferredDays, NG_IDs)'
    )

    parser.add_argument(
        '--year',
        type=int,
        default=today.year,
        help='Target year'
    )

    parser.add_argument(
        '--month',
        type=int,
        default=today.month,
        help='Target month (1-12)'
    )

    parser.add_argument(
        '--output-dir',
        type=str,
        default='output',
        help='Directory to save output CSV files'
    )

    parser.add_argument(
        '--template',
        type=str,
        default=None,
        help='Write an example roster CSV to this path and exit'
    )

    parser.add_argument(
        '--log-level',
        type=str,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        default='INFO',
        help='Logging level'
    )

    parser.add_argument(
        '--json-output',
        action='store_true',
        help='Output results as JSON'
    )

    return parser.parse_args(argv)


def setup_logging(log_level):
    """Configure logging."""
    numeric_level = getattr(logging, log_level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f'Invalid log level: {log_level}')

    logging.basicConfig(
        level=numeric_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def main(argv=None):
    """Main entry point for the CLI."""
    args = parse_args(argv)
    setup_logging(args.log_level)

    if args.template:
        template_path = Path(args.template)
        template_path.write_text(roster_template(), encoding='utf-8')
        print(f"Roster template written to {template_path}")
        return

    roster_path = Path(args.roster)
    if not roster_path.exists():
        print(f"Error: Roster file does not exist: {roster_path}")
        sys.exit(1)

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    service = ScheduleService(
        roster_path=str(roster_path),
        output_dir=str(output_dir)
    )
    results = service.run(args.year, args.month)

    if args.json_output:
        print(json.dumps(results, indent=2, ensure_ascii=False))
        if not results['success']:
            sys.exit(1)
        return

    print(f"\nSchedule Results for {args.year}-{args.month:02d}:")

    if results['success']:
        summary = results['schedule_summary']
        print(f"  Students placed: {summary['assigned_students']}/{summary['total_students']}")
        print(f"  Slots used: {summary['filled_slots']}/{summary['total_slots']}")

        if results['unassigned']:
            print("\nCould not place (no eligible preferred day):")
            for student in results['unassigned']:
                print(f"  {student['name']} ({student['id']})")

        if results['skipped_lines']:
            print(f"\nSkipped {len(results['skipped_lines'])} roster lines:")
            for skipped in results['skipped_lines']:
                print(f"  line {skipped['line_number']}: {skipped['reason']}")

        print("\nOutput files:")
        for name, path in results['output_files'].items():
            print(f"  {name}: {path}")
    else:
        print(f"  Error: {results['error']}")
        sys.exit(1)


if __name__ == '__main__':
    main()
