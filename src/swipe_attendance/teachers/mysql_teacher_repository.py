from __future__ import annotations

from typing import Optional, Sequence

from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import Teacher
from .repository import TeacherRepository


class MySQLTeacherRepository(TeacherRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _load(self, where: str, value) -> Optional[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT teacher_id, name, email, password_hash
                FROM teachers
                WHERE {where}=%s
                """,
                (value,),
            )
            row = fetchone(cur)
            if not row:
                return None
            cur.execute(
                "SELECT subject FROM teacher_subjects WHERE teacher_id=%s ORDER BY subject",
                (row["teacher_id"],),
            )
            subjects = tuple(r["subject"] for r in fetchall(cur))
            return Teacher(
                teacher_id=int(row["teacher_id"]),
                name=row["name"],
                email=row["email"],
                password_hash=row["password_hash"],
                subjects=subjects,
            )

    def get_by_id(self, teacher_id: int) -> Optional[Teacher]:
        return self._load("teacher_id", int(teacher_id))

    def get_by_email(self, email: str) -> Optional[Teacher]:
        return self._load("email", email)

    def create_teacher(self, *, name: str, email: str, password_hash: str, subjects: Sequence[str]) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "INSERT INTO teachers(name, email, password_hash) VALUES(%s,%s,%s)",
                    (name, email, password_hash),
                )
                teacher_id = int(cur.lastrowid)
                for subject in subjects:
                    cur.execute(
                        "INSERT INTO teacher_subjects(teacher_id, subject) VALUES(%s,%s)",
                        (teacher_id, subject),
                    )
                return teacher_id
        except Exception as e:
            if is_duplicate_key(e):
                raise ValidationError("A teacher already exists with this email") from e
            raise

    def add_subject(self, teacher_id: int, subject: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT IGNORE INTO teacher_subjects(teacher_id, subject) VALUES(%s,%s)",
                (int(teacher_id), subject),
            )
