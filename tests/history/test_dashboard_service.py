from __future__ import annotations

from datetime import timedelta
from uuid import uuid4

from swipe_attendance.core.enums import AttendanceStatus
from swipe_attendance.sessions.model import CompletedSession, Decision


def _session(teacher_id, fixed_now, present, absent):
    statuses = [AttendanceStatus.PRESENT] * present + [AttendanceStatus.ABSENT] * absent
    return CompletedSession(
        teacher_id=teacher_id,
        subject="Math",
        started_at=fixed_now,
        walk_id=uuid4().hex,
        decisions=tuple(Decision(student_id=i + 1, status=s) for i, s in enumerate(statuses)),
    )


def test_dashboard_stats(container, teacher, add_student, fixed_now):
    add_student()
    add_student()
    history = container.history_service
    history.save(_session(teacher.teacher_id, fixed_now, 1, 1), now=fixed_now - timedelta(days=1))  # 50
    history.save(_session(teacher.teacher_id, fixed_now, 3, 0), now=fixed_now - timedelta(days=2))  # 100
    history.save(_session(teacher.teacher_id, fixed_now, 0, 1), now=fixed_now - timedelta(days=10))  # 0, outside week

    stats = container.dashboard_service.stats(teacher.teacher_id, now=fixed_now)

    assert stats.total_students == 2
    assert stats.total_records == 3
    assert stats.average_rate == 75
    assert [e.summary.rate for e in stats.recent] == [50, 100, 0]


def test_dashboard_without_records(container, teacher, fixed_now):
    stats = container.dashboard_service.stats(teacher.teacher_id, now=fixed_now)

    assert stats.total_records == 0
    assert stats.average_rate == 0
    assert stats.recent == ()
