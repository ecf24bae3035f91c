"""Sequential roster traversal (the swipe mechanic).

Every function takes a SessionState and returns a new one; nothing is held
between calls, so callers decide where the state lives.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Any, Iterable, Optional
from uuid import uuid4

from ..common.validators import require_enum
from ..core.constants import MAX_ROSTER_SIZE
from ..core.enums import AttendanceStatus
from ..core.exceptions import OutOfRangeError, ValidationError
from ..roster.model import Student
from .model import CompletedSession, Decision, SessionState


def _new_walk_id() -> str:
    return uuid4().hex


def start(
    roster: Iterable[Student],
    *,
    subject: str,
    started_at: datetime,
    walk_id: Optional[str] = None,
) -> SessionState:
    ids = tuple(s.student_id for s in roster)
    if len(set(ids)) != len(ids):
        raise ValidationError("Roster contains the same student twice")
    if len(ids) > MAX_ROSTER_SIZE:
        raise ValidationError(f"A roster can hold at most {MAX_ROSTER_SIZE} students")
    return SessionState(subject=subject, started_at=started_at, roster=ids, walk_id=walk_id or _new_walk_id())


def decide(state: SessionState, status: Any) -> SessionState:
    status = require_enum(status, AttendanceStatus, "Status")
    if state.is_complete:
        raise OutOfRangeError("All students have already been marked")

    decision = Decision(student_id=state.roster[state.position], status=status)
    return replace(state, decisions=state.decisions + (decision,))


def retake(state: SessionState, *, started_at: Optional[datetime] = None) -> SessionState:
    return replace(state, decisions=(), started_at=started_at or state.started_at, walk_id=_new_walk_id())


def finalize(state: SessionState, *, teacher_id: int) -> CompletedSession:
    if not state.is_complete:
        raise ValidationError(f"{state.remaining} student(s) still need to be marked")
    return CompletedSession(
        teacher_id=teacher_id,
        subject=state.subject,
        started_at=state.started_at,
        walk_id=state.walk_id,
        decisions=state.decisions,
    )
