from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

from werkzeug.security import generate_password_hash

from ..core.constants import DEFAULT_STUDENT_PHOTO
from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)

DEMO_TEACHER = {
    "name": "Demo Teacher",
    "email": "teacher@example.com",
    "password": "teacher123",
    "subjects": ("Mathematics", "Physics"),
}

DEMO_STUDENTS = (
    ("Aarav Shah", "R-001", "10", "A", 15, "Male"),
    ("Mia Chen", "R-002", "10", "A", 15, "Female"),
    ("Noah Okafor", "R-003", "10", "A", 16, "Male"),
    ("Sofia Rossi", "R-004", "10", "A", 15, "Female"),
    ("Kai Morgan", "R-005", "10", "A", 16, "Other"),
)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_line_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema files (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = DatabaseConnection(target).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)

    sql = Path(schema_path).read_text(encoding="utf-8")
    sql = _strip_line_comments(_strip_create_db_and_use(sql))

    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("Schema applied from %s", schema_path)


def ensure_demo_data(db_config: dict) -> int:
    """Create (or refresh) the demo teacher and its roster; returns the teacher id."""

    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor(dictionary=True)
        password_hash = generate_password_hash(DEMO_TEACHER["password"])

        cur.execute("SELECT teacher_id FROM teachers WHERE email=%s", (DEMO_TEACHER["email"],))
        existing = cur.fetchone()
        if existing:
            teacher_id = int(existing["teacher_id"])
            cur.execute(
                "UPDATE teachers SET name=%s, password_hash=%s WHERE teacher_id=%s",
                (DEMO_TEACHER["name"], password_hash, teacher_id),
            )
        else:
            cur.execute(
                "INSERT INTO teachers (name, email, password_hash) VALUES (%s, %s, %s)",
                (DEMO_TEACHER["name"], DEMO_TEACHER["email"], password_hash),
            )
            teacher_id = int(cur.lastrowid)

        for subject in DEMO_TEACHER["subjects"]:
            cur.execute(
                "INSERT IGNORE INTO teacher_subjects (teacher_id, subject) VALUES (%s, %s)",
                (teacher_id, subject),
            )

        for name, roll, class_name, section, age, gender in DEMO_STUDENTS:
            cur.execute(
                """
                INSERT IGNORE INTO students
                    (teacher_id, name, roll_number, class_name, section, age, gender, photo)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                """,
                (teacher_id, name, roll, class_name, section, age, gender, DEFAULT_STUDENT_PHOTO),
            )

        conn.commit()
        return teacher_id
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
