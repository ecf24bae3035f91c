from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Teacher:
    """Domain entity: an authenticated teacher owning a roster.

    Note: Plain data object, no DB access here.
    """

    teacher_id: int
    name: str
    email: str
    password_hash: str
    subjects: tuple[str, ...] = field(default_factory=tuple)

    def teaches(self, subject: str) -> bool:
        return subject in self.subjects
