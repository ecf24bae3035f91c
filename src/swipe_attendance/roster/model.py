from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Gender


@dataclass(frozen=True)
class Student:
    """Domain entity: a student on one teacher's roster.

    Immutable; a session only ever sees a snapshot of these.
    """

    student_id: int
    teacher_id: int
    name: str
    roll_number: str
    class_name: str
    section: str
    age: int
    gender: Gender
    photo: str
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class StudentDraft:
    """Validated input for creating or replacing a student's fields."""

    name: str
    roll_number: str
    class_name: str
    section: str
    age: int
    gender: Gender
    photo: str
