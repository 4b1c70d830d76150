from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .attendance.stats import StatsService
from .database.connection import connection_from_dict
from .ledger.client import LedgerClient
from .ledger.service import LedgerService
from .sessions.mysql_session_repository import MySQLSessionRepository
from .sessions.mysql_session_student_repository import MySQLSessionStudentRepository
from .sessions.repository import SessionRepository, SessionStudentRepository
from .sessions.service import SessionService
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import StudentService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService
from .vision.client import DEFAULT_VISION_URL, GoogleVisionClient, VisionClient
from .vision.service import VisionService


@dataclass(frozen=True)
class Container:
    """Explicit clients and services handed to every caller (no module singletons)."""

    users_repo: UserRepository
    students_repo: StudentRepository
    sessions_repo: SessionRepository
    roster_repo: SessionStudentRepository
    attendance_repo: AttendanceRepository

    auth_service: AuthService
    student_service: StudentService
    session_service: SessionService
    attendance_service: AttendanceService
    stats_service: StatsService
    vision_service: VisionService
    ledger_service: LedgerService

    ledger: Optional[LedgerClient] = None


def build_services(
    *,
    users_repo: UserRepository,
    students_repo: StudentRepository,
    sessions_repo: SessionRepository,
    roster_repo: SessionStudentRepository,
    attendance_repo: AttendanceRepository,
    vision_client: Optional[VisionClient] = None,
    ledger: Optional[LedgerClient] = None,
) -> Container:
    ledger_service = LedgerService()
    return Container(
        users_repo=users_repo,
        students_repo=students_repo,
        sessions_repo=sessions_repo,
        roster_repo=roster_repo,
        attendance_repo=attendance_repo,
        auth_service=AuthService(users_repo),
        student_service=StudentService(students_repo),
        session_service=SessionService(sessions_repo, roster_repo, students_repo),
        attendance_service=AttendanceService(attendance_repo, sessions_repo, ledger_service=ledger_service),
        stats_service=StatsService(attendance_repo, sessions_repo, students_repo, ledger_service=ledger_service),
        vision_service=VisionService(vision_client),
        ledger_service=ledger_service,
        ledger=ledger,
    )


def build_container(
    *,
    db_config: dict,
    vision_config: Optional[dict] = None,
    ledger: Optional[LedgerClient] = None,
) -> Container:
    conn = connection_from_dict(db_config)

    vision_config = vision_config or {}
    vision_client = None
    if vision_config.get("api_key"):
        vision_client = GoogleVisionClient(
            str(vision_config["api_key"]),
            url=str(vision_config.get("url") or DEFAULT_VISION_URL),
            timeout=float(vision_config.get("timeout", 10.0)),
        )

    return build_services(
        users_repo=MySQLUserRepository(conn),
        students_repo=MySQLStudentRepository(conn),
        sessions_repo=MySQLSessionRepository(conn),
        roster_repo=MySQLSessionStudentRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        vision_client=vision_client,
        ledger=ledger,
    )
