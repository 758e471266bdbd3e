"""Scheduling errors."""
from typing import Optional


class SchedulerError(Exception):
    """Base class for lesson scheduler errors."""
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(SchedulerError, ValueError):
    """Raised when the target month or a roster payload cannot be scheduled."""


class RowParseError(SchedulerError):
    """
    Describes a roster CSV line that was dropped during import.

    The roster parser never raises this; it collects instances as
    diagnostics so the caller can report them.
    """
    def __init__(self, message: str, line_number: int, line: str, reason: Optional[str] = None):
        super().__init__(message)
        self.line_number = line_number
        self.line = line
        self.reason = reason or message

    def to_dict(self) -> dict:
        return {
            'line_number': self.line_number,
            'line': self.line,
            'reason': self.reason
        }
