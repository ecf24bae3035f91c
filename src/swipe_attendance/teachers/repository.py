from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Teacher


class TeacherRepository(Protocol):
    """Repository interface for teachers.

    Note (DIP): services depend on this protocol, not on a concrete database.
    """

    def get_by_id(self, teacher_id: int) -> Optional[Teacher]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Teacher]:
        raise NotImplementedError

    def create_teacher(self, *, name: str, email: str, password_hash: str, subjects: Sequence[str]) -> int:
        raise NotImplementedError

    def add_subject(self, teacher_id: int, subject: str) -> None:
        raise NotImplementedError
