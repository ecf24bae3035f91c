from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from .aggregator import AttendanceSummary, summarize

_STATUS_CODES = {AttendanceStatus.PRESENT: "p", AttendanceStatus.ABSENT: "a"}
_STATUS_BY_CODE = {code: status for status, code in _STATUS_CODES.items()}


@dataclass(frozen=True)
class Decision:
    student_id: int
    status: AttendanceStatus


@dataclass(frozen=True)
class SessionState:
    """Explicit state of one walk through a roster.

    `roster` holds student ids in traversal order; `decisions` only ever grows
    by one entry per step, in that same order. `walk_id` names this walk so a
    finished walk is saved at most once.
    """

    subject: str
    started_at: datetime
    roster: tuple[int, ...]
    walk_id: str
    decisions: tuple[Decision, ...] = ()

    @property
    def position(self) -> int:
        return len(self.decisions)

    @property
    def size(self) -> int:
        return len(self.roster)

    @property
    def is_complete(self) -> bool:
        return self.position >= self.size

    @property
    def remaining(self) -> int:
        return max(self.size - self.position, 0)

    @property
    def current_student_id(self) -> Optional[int]:
        if self.is_complete:
            return None
        return self.roster[self.position]

    @property
    def summary(self) -> AttendanceSummary:
        return summarize(self.decisions, self.size)

    def to_dict(self) -> dict:
        # Decision i always belongs to roster[i], so only the statuses are kept.
        return {
            "subject": self.subject,
            "started_at": self.started_at.isoformat(),
            "walk_id": self.walk_id,
            "roster": list(self.roster),
            "decisions": "".join(_STATUS_CODES[d.status] for d in self.decisions),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SessionState":
        try:
            roster = tuple(int(sid) for sid in data["roster"])
            codes = data["decisions"]
            walk_id = data["walk_id"]
            if not isinstance(codes, str) or not isinstance(walk_id, str) or not walk_id:
                raise TypeError("decisions and walk_id must be strings")
            if len(codes) > len(roster):
                raise ValueError("more decisions than students")
            decisions = tuple(
                Decision(student_id=sid, status=_STATUS_BY_CODE[code]) for sid, code in zip(roster, codes)
            )
            return cls(
                subject=str(data["subject"]),
                started_at=datetime.fromisoformat(data["started_at"]),
                roster=roster,
                walk_id=walk_id,
                decisions=decisions,
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ValidationError("Stored attendance session is corrupted") from e


@dataclass(frozen=True)
class CompletedSession:
    """A finished walk, ready to be persisted."""

    teacher_id: int
    subject: str
    started_at: datetime
    walk_id: str
    decisions: tuple[Decision, ...]

    @property
    def summary(self) -> AttendanceSummary:
        return summarize(self.decisions, len(self.decisions))
