from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Mapping, Optional

from ..common.datetime_utils import now_local
from ..core.exceptions import NotFoundError, ValidationError
from ..history.model import HistoryEntry
from ..history.service import HistoryService
from ..roster.model import Student
from ..roster.service import RosterService
from . import walker
from .model import SessionState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StepResult:
    """Outcome of one walker operation.

    `entry` is set exactly once per session: on the step that completed it.
    """

    state: SessionState
    entry: Optional[HistoryEntry] = None


def _student_id(item: Any) -> int:
    raw = item.get("studentId", item.get("student_id")) if isinstance(item, Mapping) else None
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValidationError("Each decision needs a numeric studentId")


class SessionService:
    """Use case: take attendance for one subject, one student at a time."""

    def __init__(self, roster: RosterService, history: HistoryService):
        self._roster = roster
        self._history = history

    def _advance_to(self, teacher_id: int, state: SessionState, now: datetime) -> StepResult:
        if not state.is_complete:
            return StepResult(state=state)
        completed = walker.finalize(state, teacher_id=teacher_id)
        return StepResult(state=state, entry=self._history.save(completed, now=now))

    def begin(self, teacher_id: int, subject: str, *, now: Optional[datetime] = None) -> StepResult:
        now = now or now_local()
        students = self._roster.list_roster(teacher_id, subject)
        state = walker.start(students, subject=subject.strip(), started_at=now)
        logger.info("Teacher %s started attendance for %s (%d students)", teacher_id, state.subject, state.size)
        return self._advance_to(teacher_id, state, now)

    def decide(
        self,
        teacher_id: int,
        state: SessionState,
        status: Any,
        *,
        now: Optional[datetime] = None,
    ) -> StepResult:
        state = walker.decide(state, status)
        return self._advance_to(teacher_id, state, now or now_local())

    def retake(self, teacher_id: int, state: SessionState, *, now: Optional[datetime] = None) -> StepResult:
        """Restart the walk over the same roster snapshot.

        On a completed state this begins a brand-new session; the record that
        was already saved is left untouched.
        """

        now = now or now_local()
        state = walker.retake(state, started_at=now)
        return self._advance_to(teacher_id, state, now)

    def current_student(self, teacher_id: int, state: SessionState) -> Optional[Student]:
        if state.current_student_id is None:
            return None
        try:
            return self._roster.get(teacher_id, state.current_student_id)
        except NotFoundError:
            # Removed after the snapshot was taken; the walk still records the id.
            return None

    def record(
        self,
        teacher_id: int,
        subject: str,
        decisions: Iterable[Any],
        *,
        now: Optional[datetime] = None,
    ) -> HistoryEntry:
        """Persist a walk the client carried out on its own.

        The submitted order becomes the roster snapshot and is replayed
        through the walker, so the same invariants apply.
        """

        if decisions is None or isinstance(decisions, (str, bytes, Mapping)):
            raise ValidationError("Subject and students array are required")

        now = now or now_local()
        by_id = {s.student_id: s for s in self._roster.list_roster(teacher_id, subject)}

        items = list(decisions)
        snapshot: list[Student] = []
        for item in items:
            student_id = _student_id(item)
            if student_id not in by_id:
                raise NotFoundError(f"Student {student_id} is not on this roster")
            snapshot.append(by_id[student_id])

        state = walker.start(snapshot, subject=subject.strip(), started_at=now)
        for item in items:
            state = walker.decide(state, item.get("status"))

        result = self._advance_to(teacher_id, state, now)
        return result.entry
