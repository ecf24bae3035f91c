from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from swipe_attendance.container import build_services
from swipe_attendance.core.exceptions import DuplicateKeyError
from swipe_attendance.history.model import HistoryDecision, HistoryEntry
from swipe_attendance.roster.model import Student, StudentDraft
from swipe_attendance.teachers.model import Teacher


class InMemoryTeachers:
    def __init__(self):
        self._by_id: dict[int, Teacher] = {}
        self._id = 0

    def add(self, *, name: str, email: str, password: str, subjects=()) -> Teacher:
        tid = self.create_teacher(
            name=name, email=email, password_hash=generate_password_hash(password), subjects=subjects
        )
        return self._by_id[tid]

    def get_by_id(self, teacher_id: int) -> Optional[Teacher]:
        return self._by_id.get(int(teacher_id))

    def get_by_email(self, email: str) -> Optional[Teacher]:
        return next((t for t in self._by_id.values() if t.email == email), None)

    def create_teacher(self, *, name, email, password_hash, subjects) -> int:
        self._id += 1
        self._by_id[self._id] = Teacher(
            teacher_id=self._id, name=name, email=email, password_hash=password_hash, subjects=tuple(subjects)
        )
        return self._id

    def add_subject(self, teacher_id: int, subject: str) -> None:
        t = self._by_id[int(teacher_id)]
        if subject not in t.subjects:
            self._by_id[t.teacher_id] = replace(t, subjects=t.subjects + (subject,))


class InMemoryStudents:
    def __init__(self, clock: datetime):
        self._rows: dict[int, Student] = {}
        self._id = 0
        self._clock = clock

    def list_for_teacher(self, teacher_id: int):
        rows = [s for s in self._rows.values() if s.teacher_id == teacher_id]
        rows.sort(key=lambda s: (s.created_at, s.student_id))
        return rows

    def get_by_id(self, teacher_id: int, student_id: int) -> Optional[Student]:
        s = self._rows.get(student_id)
        return s if s and s.teacher_id == teacher_id else None

    def get_by_roll_number(self, teacher_id: int, roll_number: str) -> Optional[Student]:
        return next(
            (s for s in self._rows.values() if s.teacher_id == teacher_id and s.roll_number == roll_number),
            None,
        )

    def create(self, teacher_id: int, draft: StudentDraft) -> Student:
        if self.get_by_roll_number(teacher_id, draft.roll_number):
            raise DuplicateKeyError("Student with this roll number already exists")
        self._id += 1
        student = Student(
            student_id=self._id,
            teacher_id=teacher_id,
            created_at=self._clock + timedelta(seconds=self._id),
            **vars(draft),
        )
        self._rows[self._id] = student
        return student

    def update(self, teacher_id: int, student_id: int, draft: StudentDraft) -> Optional[Student]:
        current = self.get_by_id(teacher_id, student_id)
        if not current:
            return None
        self._rows[student_id] = replace(current, **vars(draft))
        return self._rows[student_id]

    def delete(self, teacher_id: int, student_id: int) -> bool:
        if not self.get_by_id(teacher_id, student_id):
            return False
        del self._rows[student_id]
        return True

    def count_for_teacher(self, teacher_id: int) -> int:
        return len(self.list_for_teacher(teacher_id))

    def peek(self, student_id: int) -> Optional[Student]:
        return self._rows.get(student_id)


class InMemoryHistory:
    def __init__(self, students: InMemoryStudents):
        self._rows: dict[int, HistoryEntry] = {}
        self._id = 0
        self._students = students
        self._walk_ids: set[str] = set()

    def save(self, session, *, created_at: datetime) -> HistoryEntry:
        if session.walk_id in self._walk_ids:
            raise DuplicateKeyError("This attendance session was already saved")
        self._walk_ids.add(session.walk_id)
        self._id += 1
        decisions = []
        for d in session.decisions:
            s = self._students.peek(d.student_id)
            decisions.append(
                HistoryDecision(
                    student_id=d.student_id,
                    status=d.status,
                    name=s.name if s else None,
                    roll_number=s.roll_number if s else None,
                    class_name=s.class_name if s else None,
                    section=s.section if s else None,
                )
            )
        entry = HistoryEntry(
            entry_id=self._id,
            teacher_id=session.teacher_id,
            subject=session.subject,
            started_at=session.started_at,
            created_at=created_at,
            decisions=tuple(decisions),
            summary=session.summary,
        )
        self._rows[self._id] = entry
        return entry

    def find(self, teacher_id, *, subject=None, created_from=None, created_to=None, limit, offset=0):
        rows = [
            e
            for e in self._rows.values()
            if e.teacher_id == teacher_id
            and (not subject or e.subject == subject)
            and (created_from is None or e.created_at >= created_from)
            and (created_to is None or e.created_at <= created_to)
        ]
        rows.sort(key=lambda e: (e.created_at, e.entry_id), reverse=True)
        return rows[offset : offset + limit], len(rows)

    def rates_since(self, teacher_id, since):
        return [e.summary.rate for e in self._rows.values() if e.teacher_id == teacher_id and e.created_at >= since]

    def purge_older_than(self, cutoff):
        expired = [k for k, e in self._rows.items() if e.created_at < cutoff]
        for k in expired:
            del self._rows[k]
        return len(expired)

    def all(self):
        return list(self._rows.values())


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 3, 10, 9, 0, 0)


@pytest.fixture
def teachers_repo() -> InMemoryTeachers:
    return InMemoryTeachers()


@pytest.fixture
def students_repo(fixed_now) -> InMemoryStudents:
    return InMemoryStudents(fixed_now - timedelta(days=60))


@pytest.fixture
def history_repo(students_repo) -> InMemoryHistory:
    return InMemoryHistory(students_repo)


@pytest.fixture
def container(teachers_repo, students_repo, history_repo):
    return build_services(teachers_repo=teachers_repo, students_repo=students_repo, history_repo=history_repo)


@pytest.fixture
def teacher(teachers_repo) -> Teacher:
    return teachers_repo.add(
        name="Ms. Rivera", email="rivera@example.com", password="secret1", subjects=("Math", "Science")
    )


@pytest.fixture
def add_student(container, teacher):
    counter = {"n": 0}

    def _add(name: Optional[str] = None, *, teacher_id: Optional[int] = None, roll_number: Optional[str] = None):
        counter["n"] += 1
        n = counter["n"]
        return container.roster_service.add(
            teacher_id or teacher.teacher_id,
            name=name or f"Student {n}",
            roll_number=roll_number or f"R-{n:03d}",
            class_name="9",
            section="B",
            age=14,
            gender="Female" if n % 2 else "Male",
        )

    return _add
