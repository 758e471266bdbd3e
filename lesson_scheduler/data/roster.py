"""
Roster import module.

Handles reading student rosters from CSV text. The parser is deliberately
lenient: malformed lines are dropped and reported as diagnostics instead of
failing the import.
"""
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from ..errors import RowParseError
from ..models.entities import Student

logger = logging.getLogger(__name__)

ROSTER_TEMPLATE = (
    "ID,Name,PreferredDays(semicolon sep),NG_IDs(semicolon sep)\n"
    "1,田中太郎,1;5;10,2;3\n"
    "2,佐藤花子,10;15,"
)

HEADER_MARKERS = ('name', 'id')
LEADING_INT = re.compile(r'\s*([+-]?\d+)')


@dataclass
class RosterParseResult:
    """Parsed students plus the lines that were dropped."""
    students: List[Student] = field(default_factory=list)
    skipped: List[RowParseError] = field(default_factory=list)


def roster_template() -> str:
    """Get the example roster CSV offered as a download."""
    return ROSTER_TEMPLATE


def _is_header(line: str) -> bool:
    lowered = line.lower()
    return any(marker in lowered for marker in HEADER_MARKERS)


def parse_preferred_days(value: str) -> List[int]:
    """Parse a semicolon-separated list of day numbers, dropping anything non-numeric."""
    value = value.replace('"', '')
    if not value:
        return []

    days = []
    for part in value.split(';'):
        match = LEADING_INT.match(part)
        if match:
            days.append(int(match.group(1)))
    return days


def parse_ng_ids(value: str) -> List[str]:
    """Parse a semicolon-separated list of student ids."""
    value = value.replace('"', '')
    if not value:
        return []
    return [part.strip() for part in value.split(';') if part.strip()]


def _parse_line(line: str, line_number: int) -> Student:
    parts = line.split(',')
    if len(parts) < 2:
        raise RowParseError("Expected at least 2 fields", line_number, line)

    student_id = parts[0].strip()
    name = parts[1].strip()
    if not student_id or not name:
        raise RowParseError("Missing id or name", line_number, line)

    preferred_days = parse_preferred_days(parts[2]) if len(parts) > 2 else []
    ng_with = parse_ng_ids(parts[3]) if len(parts) > 3 else []

    return Student(id=student_id, name=name, preferred_days=preferred_days, ng_with=ng_with)


def parse_roster_csv(text: str) -> RosterParseResult:
    """
    Parse roster CSV text into students.

    Columns are id, name, preferred days and NG ids. The first line is
    treated as a header if it mentions "name" or "id". Lines with fewer
    than two fields or a blank id/name are skipped.

    Args:
        text: Raw CSV text

    Returns:
        RosterParseResult with the parsed students and skipped-line diagnostics
    """
    result = RosterParseResult()
    lines = text.strip().split('\n')

    start_index = 1 if _is_header(lines[0]) else 0

    for index in range(start_index, len(lines)):
        line = lines[index].strip()
        if not line:
            continue

        try:
            result.students.append(_parse_line(line, index + 1))
        except RowParseError as e:
            logger.debug(f"Skipping roster line {e.line_number}: {e.reason}")
            result.skipped.append(e)

    if result.skipped:
        logger.warning(f"Skipped {len(result.skipped)} malformed roster lines")
    logger.info(f"Parsed {len(result.students)} students from roster")

    return result


class RosterLoader:
    """
    Loads a student roster from a CSV file on disk.
    """

    def __init__(self, roster_path: Union[str, Path], encoding: Optional[str] = None):
        """
        Initialize the loader.

        Args:
            roster_path: Path to the roster CSV file
            encoding: File encoding (UTF-8, BOM tolerated, by default)
        """
        self.roster_path = Path(roster_path)
        self.encoding = encoding or 'utf-8-sig'

        if not self.roster_path.exists():
            logger.error(f"Roster file not found at {self.roster_path}")
            raise FileNotFoundError(f"Roster file not found at {self.roster_path}")

    def load(self) -> RosterParseResult:
        """Read and parse the roster file."""
        logger.info(f"Loading roster from {self.roster_path}")
        text = self.roster_path.read_text(encoding=self.encoding)
        return parse_roster_csv(text)
