from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, new_document_id
from .model import SessionStudent
from .repository import SessionStudentRepository


class MySQLSessionStudentRepository(SessionStudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        session_student_id = new_document_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO session_students(session_student_id, session_id, student_id,
                                             full_name, roll_number, class_name, added_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (session_student_id, session_id, student_id, full_name, roll_number, class_name, added_at),
            )
        return session_student_id

    def remove(self, *, session_id: str, student_id: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM session_students WHERE session_id=%s AND student_id=%s",
                (session_id, student_id),
            )
            return int(cur.rowcount)

    def list_for_session(self, session_id: str) -> Sequence[SessionStudent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT session_student_id, session_id, student_id, full_name, roll_number, class_name, added_at
                FROM session_students
                WHERE session_id=%s
                ORDER BY added_at
                """,
                (session_id,),
            )
            return [
                SessionStudent(
                    session_student_id=r["session_student_id"],
                    session_id=r["session_id"],
                    student_id=r["student_id"],
                    added_at=r["added_at"],
                    full_name=r.get("full_name"),
                    roll_number=r.get("roll_number"),
                    class_name=r.get("class_name"),
                )
                for r in fetchall(cur)
            ]
