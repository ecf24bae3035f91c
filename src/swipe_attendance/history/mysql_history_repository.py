from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..core.exceptions import DuplicateKeyError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key, placeholders
from ..sessions.aggregator import AttendanceSummary
from ..sessions.model import CompletedSession
from .model import HistoryDecision, HistoryEntry
from .repository import HistoryRepository

_SESSION_COLUMNS = """
    session_id, teacher_id, subject, started_at, created_at,
    total_students, present_count, absent_count, attendance_rate
"""


def _load_decisions(cur, session_ids: Sequence[int]) -> dict[int, list[HistoryDecision]]:
    out: dict[int, list[HistoryDecision]] = {sid: [] for sid in session_ids}
    if not session_ids:
        return out

    cur.execute(
        f"""
        SELECT d.session_id, d.student_id, d.status,
               s.name, s.roll_number, s.class_name, s.section
        FROM attendance_decisions d
        LEFT JOIN students s ON s.student_id = d.student_id
        WHERE d.session_id IN ({placeholders(session_ids)})
        ORDER BY d.session_id, d.position
        """,
        tuple(session_ids),
    )
    for r in fetchall(cur):
        out[int(r["session_id"])].append(
            HistoryDecision(
                student_id=int(r["student_id"]),
                status=AttendanceStatus(r["status"]),
                name=r.get("name"),
                roll_number=r.get("roll_number"),
                class_name=r.get("class_name"),
                section=r.get("section"),
            )
        )
    return out


def _to_entry(r: dict, decisions: Sequence[HistoryDecision]) -> HistoryEntry:
    return HistoryEntry(
        entry_id=int(r["session_id"]),
        teacher_id=int(r["teacher_id"]),
        subject=r["subject"],
        started_at=r["started_at"],
        created_at=r["created_at"],
        decisions=tuple(decisions),
        summary=AttendanceSummary(
            total=int(r["total_students"]),
            present=int(r["present_count"]),
            absent=int(r["absent_count"]),
            rate=int(r["attendance_rate"]),
        ),
    )


def _where(
    teacher_id: int,
    subject: Optional[str],
    created_from: Optional[datetime],
    created_to: Optional[datetime],
) -> tuple[str, list]:
    clauses = ["teacher_id=%s"]
    params: list = [teacher_id]
    if subject:
        clauses.append("subject=%s")
        params.append(subject)
    if created_from is not None:
        clauses.append("created_at>=%s")
        params.append(created_from)
    if created_to is not None:
        clauses.append("created_at<=%s")
        params.append(created_to)
    return " AND ".join(clauses), params


class MySQLHistoryRepository(HistoryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def save(self, session: CompletedSession, *, created_at: datetime) -> HistoryEntry:
        try:
            return self._insert(session, created_at)
        except Exception as e:
            if is_duplicate_key(e):
                raise DuplicateKeyError("This attendance session was already saved") from e
            raise

    def _insert(self, session: CompletedSession, created_at: datetime) -> HistoryEntry:
        summary = session.summary
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_sessions(
                    teacher_id, walk_id, subject, started_at, created_at,
                    total_students, present_count, absent_count, attendance_rate
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    session.teacher_id,
                    session.walk_id,
                    session.subject,
                    session.started_at,
                    created_at,
                    summary.total,
                    summary.present,
                    summary.absent,
                    summary.rate,
                ),
            )
            session_id = int(cur.lastrowid)

            if session.decisions:
                cur.executemany(
                    """
                    INSERT INTO attendance_decisions(session_id, position, student_id, status)
                    VALUES(%s,%s,%s,%s)
                    """,
                    [
                        (session_id, position, d.student_id, d.status.value)
                        for position, d in enumerate(session.decisions)
                    ],
                )

            cur.execute(f"SELECT {_SESSION_COLUMNS} FROM attendance_sessions WHERE session_id=%s", (session_id,))
            row = fetchone(cur)
            decisions = _load_decisions(cur, [session_id])
            return _to_entry(row, decisions[session_id])

    def find(
        self,
        teacher_id: int,
        *,
        subject: Optional[str] = None,
        created_from: Optional[datetime] = None,
        created_to: Optional[datetime] = None,
        limit: int,
        offset: int = 0,
    ) -> tuple[Sequence[HistoryEntry], int]:
        where, params = _where(teacher_id, subject, created_from, created_to)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS n FROM attendance_sessions WHERE {where}", tuple(params))
            total = int(fetchone(cur)["n"])

            cur.execute(
                f"""
                SELECT {_SESSION_COLUMNS}
                FROM attendance_sessions
                WHERE {where}
                ORDER BY created_at DESC, session_id DESC
                LIMIT %s OFFSET %s
                """,
                tuple(params) + (int(limit), int(offset)),
            )
            rows = fetchall(cur)
            decisions = _load_decisions(cur, [int(r["session_id"]) for r in rows])
            entries = [_to_entry(r, decisions[int(r["session_id"])]) for r in rows]
            return entries, total

    def rates_since(self, teacher_id: int, since: datetime) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT attendance_rate FROM attendance_sessions WHERE teacher_id=%s AND created_at>=%s",
                (teacher_id, since),
            )
            return [int(r["attendance_rate"]) for r in fetchall(cur)]

    def purge_older_than(self, cutoff: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_sessions WHERE created_at<%s", (cutoff,))
            return int(cur.rowcount)
