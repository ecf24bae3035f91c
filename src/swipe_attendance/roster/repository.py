from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Student, StudentDraft


class StudentRepository(Protocol):
    def list_for_teacher(self, teacher_id: int) -> Sequence[Student]:
        """Students in creation order (the roster traversal order)."""

        raise NotImplementedError

    def get_by_id(self, teacher_id: int, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def get_by_roll_number(self, teacher_id: int, roll_number: str) -> Optional[Student]:
        raise NotImplementedError

    def create(self, teacher_id: int, draft: StudentDraft) -> Student:
        """Raises DuplicateKeyError when the roll number is taken for this teacher."""

        raise NotImplementedError

    def update(self, teacher_id: int, student_id: int, draft: StudentDraft) -> Optional[Student]:
        raise NotImplementedError

    def delete(self, teacher_id: int, student_id: int) -> bool:
        raise NotImplementedError

    def count_for_teacher(self, teacher_id: int) -> int:
        raise NotImplementedError
