from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.constants import DEFAULT_ATTENDANCE_METHOD
from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, new_document_id
from .model import AttendanceRecord
from .repository import AttendanceRepository

_SELECT = """
    SELECT attendance_id, session_id, student_id, status, recorded_at, photo_hash, method, ledger_tx_id
    FROM attendance_records
"""


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=r["attendance_id"],
        session_id=r["session_id"],
        student_id=r["student_id"],
        status=AttendanceStatus(r["status"]),
        timestamp=r["recorded_at"],
        photo_hash=r.get("photo_hash"),
        method=r.get("method") or DEFAULT_ATTENDANCE_METHOD,
        ledger_tx_id=r.get("ledger_tx_id"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        session_id: str,
        student_id: str,
        status: AttendanceStatus,
        timestamp: datetime,
        photo_hash: Optional[str] = None,
        method: str = DEFAULT_ATTENDANCE_METHOD,
    ) -> str:
        attendance_id = new_document_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(attendance_id, session_id, student_id, status, recorded_at, photo_hash, method)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (attendance_id, session_id, student_id, status.value, timestamp, photo_hash, method),
            )
        return attendance_id

    def get_by_id(self, attendance_id: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE attendance_id=%s", (attendance_id,))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_for_session(self, session_id: str) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE session_id=%s ORDER BY recorded_at", (session_id,))
            return [_to_record(r) for r in fetchall(cur)]

    def list_recent(self, *, since: Optional[datetime] = None, limit: Optional[int] = None) -> Sequence[AttendanceRecord]:
        clauses: list[str] = []
        params: list[object] = []
        if since is not None:
            clauses.append("recorded_at >= %s")
            params.append(since)

        sql = _SELECT
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        sql += " ORDER BY recorded_at DESC"
        if limit is not None:
            sql += " LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_record(r) for r in fetchall(cur)]

    def attach_ledger_transaction(self, attendance_id: str, transaction_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance_records SET ledger_tx_id=%s WHERE attendance_id=%s",
                (transaction_id, attendance_id),
            )
            return cur.rowcount > 0
