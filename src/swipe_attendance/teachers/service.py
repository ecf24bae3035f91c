from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH, QUICK_LOGIN_DEFAULT_PASSWORD, QUICK_LOGIN_EMAIL_DOMAIN
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from .model import Teacher
from .repository import TeacherRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionTeacher:
    """What we store into Flask session after login."""

    teacher_id: int
    name: str
    email: str
    subjects: tuple[str, ...]

    @classmethod
    def from_teacher(cls, teacher: Teacher) -> "SessionTeacher":
        return cls(
            teacher_id=teacher.teacher_id,
            name=teacher.name,
            email=teacher.email,
            subjects=tuple(teacher.subjects),
        )


def _normalize_email(email: Optional[str]) -> str:
    return require_non_empty(email, "Email").lower()


def _normalize_subjects(subjects: Optional[Iterable[str]]) -> tuple[str, ...]:
    out: list[str] = []
    for s in subjects or ():
        s = (s or "").strip()
        if s and s not in out:
            out.append(s)
    return tuple(out)


class AuthService:
    """Use case: authenticate teacher (login)."""

    def __init__(self, teachers: TeacherRepository):
        self._teachers = teachers

    def authenticate(self, email: str, password: str) -> SessionTeacher:
        teacher = self._teachers.get_by_email((email or "").strip().lower())
        if not teacher:
            logger.warning("Login failed for unknown email %r", email)
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(teacher.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            logger.warning("Login failed for teacher %s", teacher.teacher_id)
            raise AuthenticationError("Invalid email or password")

        logger.info("Teacher %s logged in", teacher.teacher_id)
        return SessionTeacher.from_teacher(teacher)


class TeacherService:
    """Use case: register teachers and resolve their permitted subjects."""

    def __init__(self, teachers: TeacherRepository):
        self._teachers = teachers

    def register(self, *, name: str, email: str, password: str, subjects: Optional[Iterable[str]] = None) -> SessionTeacher:
        name = require_non_empty(name, "Name")
        email = _normalize_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        subject_list = _normalize_subjects(subjects)

        if self._teachers.get_by_email(email):
            raise ValidationError("A teacher already exists with this email")

        teacher_id = self._teachers.create_teacher(
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
            subjects=subject_list,
        )
        logger.info("Registered teacher %s with %d subject(s)", teacher_id, len(subject_list))
        return SessionTeacher(teacher_id=teacher_id, name=name, email=email, subjects=subject_list)

    def get(self, teacher_id: int) -> Teacher:
        teacher = self._teachers.get_by_id(teacher_id)
        if not teacher:
            raise NotFoundError("Teacher not found")
        return teacher

    def require_subject(self, teacher_id: int, subject: str) -> str:
        subject = require_non_empty(subject, "Subject")
        if not self.get(teacher_id).teaches(subject):
            raise AuthorizationError(f"Subject '{subject}' is not assigned to this teacher")
        return subject

    def quick_login(self, *, name: str, subject: str) -> SessionTeacher:
        """Sign in by name alone, creating a placeholder account on first use.

        The account lives at `<name without spaces>@temp.com`; each new
        subject is added to it.
        """

        name = require_non_empty(name, "Name")
        subject = require_non_empty(subject, "Subject")
        local_part = re.sub(r"\s+", "", name.lower())
        email = _normalize_email(f"{local_part}@{QUICK_LOGIN_EMAIL_DOMAIN}")

        teacher = self._teachers.get_by_email(email)
        if teacher is None:
            teacher_id = self._teachers.create_teacher(
                name=name,
                email=email,
                password_hash=generate_password_hash(QUICK_LOGIN_DEFAULT_PASSWORD),
                subjects=(subject,),
            )
            logger.info("Quick login created teacher %s for %s", teacher_id, subject)
            return SessionTeacher(teacher_id=teacher_id, name=name, email=email, subjects=(subject,))

        if not teacher.teaches(subject):
            self._teachers.add_subject(teacher.teacher_id, subject)
            teacher = self.get(teacher.teacher_id)
        logger.info("Teacher %s quick-logged in for %s", teacher.teacher_id, subject)
        return SessionTeacher.from_teacher(teacher)
