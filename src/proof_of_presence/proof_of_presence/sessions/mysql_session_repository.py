from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Optional, Sequence

from ..core.enums import SessionStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_update, db_cursor, fetchall, fetchone, new_document_id
from .model import Session
from .repository import SessionRepository

_SELECT = """
    SELECT session_id, name, course, instructor, description, max_students, status,
           total_students, present_count, absent_count, created_at, updated_at, closed_at
    FROM sessions
"""

UPDATABLE_COLUMNS = (
    "name",
    "course",
    "instructor",
    "description",
    "max_students",
    "status",
    "total_students",
    "present_count",
    "absent_count",
    "updated_at",
    "closed_at",
)


def _to_session(r: dict) -> Session:
    return Session(
        session_id=r["session_id"],
        name=r["name"],
        course=r["course"],
        status=SessionStatus(r["status"]),
        created_at=r["created_at"],
        updated_at=r["updated_at"],
        instructor=r.get("instructor"),
        description=r.get("description"),
        max_students=int(r.get("max_students") or 0),
        total_students=int(r.get("total_students") or 0),
        present_count=int(r.get("present_count") or 0),
        absent_count=int(r.get("absent_count") or 0),
        closed_at=r.get("closed_at"),
    )


class MySQLSessionRepository(SessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, session_id: str) -> Optional[Session]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE session_id=%s", (session_id,))
            r = fetchone(cur)
            return _to_session(r) if r else None

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
        session_id = new_document_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO sessions(session_id, name, course, instructor, description, max_students, status,
                                     total_students, present_count, absent_count, created_at, updated_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s,0,0,0,%s,%s)
                """,
                (session_id, name, course, instructor, description, int(max_students), SessionStatus.ACTIVE.value, now, now),
            )
        return session_id

    def list_all(self, *, status: Optional[SessionStatus] = None) -> Sequence[Session]:
        with db_cursor(self._conn_factory) as (_, cur):
            if status is None:
                cur.execute(f"{_SELECT} ORDER BY created_at DESC")
            else:
                cur.execute(f"{_SELECT} WHERE status=%s ORDER BY created_at DESC", (status.value,))
            return [_to_session(r) for r in fetchall(cur)]

    def update(self, session_id: str, fields: Mapping[str, Any]) -> bool:
        if not fields:
            return False
        assignments, params = build_update(fields, UPDATABLE_COLUMNS)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE sessions SET {assignments} WHERE session_id=%s", (*params, session_id))
            return cur.rowcount > 0
