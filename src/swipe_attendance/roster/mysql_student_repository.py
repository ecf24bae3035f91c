from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Gender
from ..core.exceptions import DuplicateKeyError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import Student, StudentDraft
from .repository import StudentRepository

_COLUMNS = "student_id, teacher_id, name, roll_number, class_name, section, age, gender, photo, created_at"


def _to_student(r: dict) -> Student:
    return Student(
        student_id=int(r["student_id"]),
        teacher_id=int(r["teacher_id"]),
        name=r["name"],
        roll_number=r["roll_number"],
        class_name=r["class_name"],
        section=r["section"],
        age=int(r["age"]),
        gender=Gender(r["gender"]),
        photo=r["photo"],
        created_at=r.get("created_at"),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_teacher(self, teacher_id: int) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM students
                WHERE teacher_id=%s
                ORDER BY created_at ASC, student_id ASC
                """,
                (teacher_id,),
            )
            return [_to_student(r) for r in fetchall(cur)]

    def get_by_id(self, teacher_id: int, student_id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM students WHERE teacher_id=%s AND student_id=%s",
                (teacher_id, student_id),
            )
            row = fetchone(cur)
            return _to_student(row) if row else None

    def get_by_roll_number(self, teacher_id: int, roll_number: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM students WHERE teacher_id=%s AND roll_number=%s",
                (teacher_id, roll_number),
            )
            row = fetchone(cur)
            return _to_student(row) if row else None

    def create(self, teacher_id: int, draft: StudentDraft) -> Student:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO students(teacher_id, name, roll_number, class_name, section, age, gender, photo)
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        teacher_id,
                        draft.name,
                        draft.roll_number,
                        draft.class_name,
                        draft.section,
                        draft.age,
                        draft.gender.value,
                        draft.photo,
                    ),
                )
                student_id = int(cur.lastrowid)
                cur.execute(f"SELECT {_COLUMNS} FROM students WHERE student_id=%s", (student_id,))
                return _to_student(fetchone(cur))
        except Exception as e:
            if is_duplicate_key(e):
                raise DuplicateKeyError("Student with this roll number already exists") from e
            raise

    def update(self, teacher_id: int, student_id: int, draft: StudentDraft) -> Optional[Student]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    UPDATE students
                    SET name=%s, roll_number=%s, class_name=%s, section=%s, age=%s, gender=%s, photo=%s
                    WHERE teacher_id=%s AND student_id=%s
                    """,
                    (
                        draft.name,
                        draft.roll_number,
                        draft.class_name,
                        draft.section,
                        draft.age,
                        draft.gender.value,
                        draft.photo,
                        teacher_id,
                        student_id,
                    ),
                )
                cur.execute(
                    f"SELECT {_COLUMNS} FROM students WHERE teacher_id=%s AND student_id=%s",
                    (teacher_id, student_id),
                )
                row = fetchone(cur)
                return _to_student(row) if row else None
        except Exception as e:
            if is_duplicate_key(e):
                raise DuplicateKeyError("Student with this roll number already exists") from e
            raise

    def delete(self, teacher_id: int, student_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM students WHERE teacher_id=%s AND student_id=%s", (teacher_id, student_id))
            return cur.rowcount > 0

    def count_for_teacher(self, teacher_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM students WHERE teacher_id=%s", (teacher_id,))
            row = fetchone(cur)
            return int(row["n"]) if row else 0
