from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import optional_text, parse_enum, require_non_empty, require_positive_int
from ..core.constants import DEFAULT_MAX_STUDENTS
from ..core.enums import SessionStatus
from ..core.exceptions import InvalidState, NotFound
from ..students.repository import StudentRepository
from .model import Session, SessionStudent
from .repository import SessionRepository, SessionStudentRepository

logger = logging.getLogger(__name__)


class SessionService:
    """Use case: session lifecycle and roster membership."""

    def __init__(
        self,
        sessions: SessionRepository,
        roster: SessionStudentRepository,
        students: StudentRepository,
    ):
        self._sessions = sessions
        self._roster = roster
        self._students = students

    def create_session(
        self,
        *,
        name: str,
        course: str,
        instructor: Optional[str] = None,
        description: Optional[str] = None,
        max_students: int = DEFAULT_MAX_STUDENTS,
        now: Optional[datetime] = None,
    ) -> Session:
        name = require_non_empty(name, "Session name")
        course = require_non_empty(course, "Course")
        max_students = require_positive_int(max_students, "Max students")
        instructor = optional_text(instructor)
        description = optional_text(description)
        now = now or now_local()

        session_id = self._sessions.create(
            name=name,
            course=course,
            instructor=instructor,
            description=description,
            max_students=max_students,
            now=now,
        )
        logger.info("Created session %s (%s)", session_id, name)
        return Session(
            session_id=session_id,
            name=name,
            course=course,
            status=SessionStatus.ACTIVE,
            created_at=now,
            updated_at=now,
            instructor=instructor,
            description=description,
            max_students=max_students,
        )

    def list_sessions(self, *, active_only: bool = False) -> Sequence[Session]:
        return self._sessions.list_all(status=SessionStatus.ACTIVE if active_only else None)

    def get_session(self, session_id: str) -> Session:
        session = self._sessions.get_by_id(session_id)
        if not session:
            raise NotFound("Session not found")
        return session

    def close_session(self, session_id: str, *, now: Optional[datetime] = None) -> Session:
        """Close a session. Re-closing is allowed and re-stamps closed_at."""

        session = self.get_session(session_id)
        now = now or now_local()
        self._sessions.update(
            session_id,
            {"status": SessionStatus.CLOSED, "closed_at": now, "updated_at": now},
        )
        logger.info("Closed session %s", session_id)
        return replace(session, status=SessionStatus.CLOSED, closed_at=now, updated_at=now)

    def update_session_status(self, session_id: str, status, *, now: Optional[datetime] = None) -> Session:
        status = parse_enum(SessionStatus, status, "Status")
        if status == SessionStatus.CLOSED:
            return self.close_session(session_id, now=now)

        session = self.get_session(session_id)
        if session.status == SessionStatus.CLOSED:
            raise InvalidState("Closed sessions cannot be reopened")

        now = now or now_local()
        self._sessions.update(session_id, {"status": status, "updated_at": now})
        return replace(session, status=status, updated_at=now)

    def add_student_to_session(self, session_id: str, student_id: str, *, now: Optional[datetime] = None) -> SessionStudent:
        session = self.get_session(session_id)
        if not session.is_active:
            raise InvalidState("Cannot add student to inactive session")

        student = self._students.get_by_id(student_id)
        if not student:
            raise NotFound("Student not found")

        now = now or now_local()
        session_student_id = self._roster.add(
            session_id=session_id,
            student_id=student_id,
            full_name=student.full_name,
            roll_number=student.roll_number,
            class_name=student.class_name,
            added_at=now,
        )
        self._sessions.update(
            session_id,
            {"total_students": session.total_students + 1, "updated_at": now},
        )
        return SessionStudent(
            session_student_id=session_student_id,
            session_id=session_id,
            student_id=student_id,
            added_at=now,
            full_name=student.full_name,
            roll_number=student.roll_number,
            class_name=student.class_name,
        )

    def remove_student_from_session(self, session_id: str, student_id: str) -> int:
        # Unguarded by status; total_students is not decremented.
        return self._roster.remove(session_id=session_id, student_id=student_id)

    def list_session_students(self, session_id: str) -> Sequence[SessionStudent]:
        return self._roster.list_for_session(session_id)
