from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import SessionStatus
from .model import Session, SessionStudent


class SessionRepository(Protocol):
    def get_by_id(self, session_id: str) -> Optional[Session]:
        raise NotImplementedError

    def create(
        self,
        *,
        name: str,
        course: str,
        instructor: Optional[str],
        description: Optional[str],
        max_students: int,
        now: datetime,
    ) -> str:
        """Insert an active session with zero counters. Returns session_id."""

        raise NotImplementedError

    def list_all(self, *, status: Optional[SessionStatus] = None) -> Sequence[Session]:
        """Sessions ordered by created_at DESC, optionally filtered by status."""

        raise NotImplementedError

    def update(self, session_id: str, fields: Mapping[str, Any]) -> bool:
        """Partial merge of the given columns."""

        raise NotImplementedError


class SessionStudentRepository(Protocol):
    def add(
        self,
        *,
        session_id: str,
        student_id: str,
        full_name: Optional[str],
        roll_number: Optional[str],
        class_name: Optional[str],
        added_at: datetime,
    ) -> str:
        raise NotImplementedError

    def remove(self, *, session_id: str, student_id: str) -> int:
        raise NotImplementedError

    def list_for_session(self, session_id: str) -> Sequence[SessionStudent]:
        raise NotImplementedError
