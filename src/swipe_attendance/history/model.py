from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AttendanceStatus
from ..sessions.aggregator import AttendanceSummary


@dataclass(frozen=True)
class HistoryDecision:
    """A stored decision with the student's fields populated for display.

    Student fields are None once the student has been removed from the roster.
    """

    student_id: int
    status: AttendanceStatus
    name: Optional[str] = None
    roll_number: Optional[str] = None
    class_name: Optional[str] = None
    section: Optional[str] = None


@dataclass(frozen=True)
class HistoryEntry:
    """Read-only record of a finalized session."""

    entry_id: int
    teacher_id: int
    subject: str
    started_at: datetime
    created_at: datetime
    decisions: tuple[HistoryDecision, ...]
    summary: AttendanceSummary


@dataclass(frozen=True)
class Pagination:
    total: int
    page: int
    limit: int
    total_pages: int


@dataclass(frozen=True)
class HistoryPage:
    entries: tuple[HistoryEntry, ...]
    pagination: Pagination
