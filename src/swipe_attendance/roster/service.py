from __future__ import annotations

import logging
from typing import Any, Sequence

from ..common.validators import optional_string, require_enum, require_int_range, require_non_empty
from ..core.constants import DEFAULT_STUDENT_PHOTO, MAX_ROSTER_SIZE, MAX_STUDENT_AGE, MIN_STUDENT_AGE
from ..core.enums import Gender
from ..core.exceptions import DuplicateKeyError, NotFoundError, ValidationError
from ..teachers.service import TeacherService
from .model import Student, StudentDraft
from .repository import StudentRepository

logger = logging.getLogger(__name__)


def build_draft(
    *,
    name: Any,
    roll_number: Any,
    class_name: Any,
    section: Any,
    age: Any,
    gender: Any,
    photo: Any = None,
) -> StudentDraft:
    """Validate raw student fields; nothing is stored when this raises."""

    return StudentDraft(
        name=require_non_empty(name, "Name"),
        roll_number=require_non_empty(roll_number, "Roll number"),
        class_name=require_non_empty(class_name, "Class"),
        section=require_non_empty(section, "Section"),
        age=require_int_range(age, "Age", minimum=MIN_STUDENT_AGE, maximum=MAX_STUDENT_AGE),
        gender=require_enum(gender, Gender, "Gender"),
        photo=optional_string(photo, "Photo") or DEFAULT_STUDENT_PHOTO,
    )


class RosterService:
    """Use case: maintain a teacher's roster and snapshot it for a subject."""

    def __init__(self, students: StudentRepository, teachers: TeacherService):
        self._students = students
        self._teachers = teachers

    def list_students(self, teacher_id: int) -> Sequence[Student]:
        return list(self._students.list_for_teacher(teacher_id))

    def list_roster(self, teacher_id: int, subject: str) -> tuple[Student, ...]:
        """Ordered roster for a subject the teacher is permitted to take."""

        self._teachers.require_subject(teacher_id, subject)
        return tuple(self._students.list_for_teacher(teacher_id))

    def get(self, teacher_id: int, student_id: int) -> Student:
        student = self._students.get_by_id(teacher_id, student_id)
        if not student:
            raise NotFoundError("Student not found")
        return student

    def add(self, teacher_id: int, **fields: Any) -> Student:
        draft = build_draft(**fields)
        if self._students.get_by_roll_number(teacher_id, draft.roll_number):
            logger.warning("Duplicate roll number %r for teacher %s", draft.roll_number, teacher_id)
            raise DuplicateKeyError("Student with this roll number already exists")

        if self._students.count_for_teacher(teacher_id) >= MAX_ROSTER_SIZE:
            raise ValidationError(f"A roster can hold at most {MAX_ROSTER_SIZE} students")

        student = self._students.create(teacher_id, draft)
        logger.info("Teacher %s added student %s (%s)", teacher_id, student.student_id, student.roll_number)
        return student

    def update(self, teacher_id: int, student_id: int, **changes: Any) -> Student:
        current = self.get(teacher_id, student_id)
        merged = {
            "name": current.name,
            "roll_number": current.roll_number,
            "class_name": current.class_name,
            "section": current.section,
            "age": current.age,
            "gender": current.gender,
            "photo": current.photo,
        }
        merged.update({k: v for k, v in changes.items() if k in merged and v is not None})
        draft = build_draft(**merged)

        if draft.roll_number != current.roll_number:
            clash = self._students.get_by_roll_number(teacher_id, draft.roll_number)
            if clash and clash.student_id != student_id:
                raise DuplicateKeyError("Student with this roll number already exists")

        updated = self._students.update(teacher_id, student_id, draft)
        if not updated:
            raise NotFoundError("Student not found")
        return updated

    def remove(self, teacher_id: int, student_id: int) -> None:
        if not self._students.delete(teacher_id, student_id):
            raise NotFoundError("Student not found")
        logger.info("Teacher %s removed student %s", teacher_id, student_id)

    def count(self, teacher_id: int) -> int:
        return self._students.count_for_teacher(teacher_id)
