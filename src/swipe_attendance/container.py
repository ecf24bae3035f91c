from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .core.constants import HISTORY_RETENTION_DAYS
from .dashboard.service import DashboardService
from .database.connection import DatabaseConnection, DBConfig
from .history.mysql_history_repository import MySQLHistoryRepository
from .history.repository import HistoryRepository
from .history.service import HistoryService
from .roster.mysql_student_repository import MySQLStudentRepository
from .roster.repository import StudentRepository
from .roster.service import RosterService
from .sessions.service import SessionService
from .teachers.mysql_teacher_repository import MySQLTeacherRepository
from .teachers.repository import TeacherRepository
from .teachers.service import AuthService, TeacherService


@dataclass(frozen=True)
class Container:
    teachers_repo: TeacherRepository
    students_repo: StudentRepository
    history_repo: HistoryRepository

    auth_service: AuthService
    teacher_service: TeacherService
    roster_service: RosterService
    history_service: HistoryService
    session_service: SessionService
    dashboard_service: DashboardService

    conn: Optional[DatabaseConnection] = None


def build_services(
    *,
    teachers_repo: TeacherRepository,
    students_repo: StudentRepository,
    history_repo: HistoryRepository,
    retention_days: int = HISTORY_RETENTION_DAYS,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    teacher_service = TeacherService(teachers_repo)
    roster_service = RosterService(students_repo, teacher_service)
    history_service = HistoryService(history_repo, retention_days=retention_days)

    return Container(
        teachers_repo=teachers_repo,
        students_repo=students_repo,
        history_repo=history_repo,
        auth_service=AuthService(teachers_repo),
        teacher_service=teacher_service,
        roster_service=roster_service,
        history_service=history_service,
        session_service=SessionService(roster_service, history_service),
        dashboard_service=DashboardService(roster_service, history_service),
        conn=conn,
    )


def build_container(*, db_config: dict, retention_days: int = HISTORY_RETENTION_DAYS) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return build_services(
        teachers_repo=MySQLTeacherRepository(conn),
        students_repo=MySQLStudentRepository(conn),
        history_repo=MySQLHistoryRepository(conn),
        retention_days=retention_days,
        conn=conn,
    )
