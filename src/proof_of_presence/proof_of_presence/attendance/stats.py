from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional

from ..common.datetime_utils import days_ago, now_local, start_of_day
from ..common.validators import require_non_empty
from ..core.constants import DASHBOARD_ALL_LIMIT, DASHBOARD_RECENT_LIMIT, DASHBOARD_WEEK_DAYS
from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFound, ValidationError
from ..ledger.client import LedgerClient
from ..ledger.service import LedgerService
from ..sessions.repository import SessionRepository
from ..students.repository import StudentRepository
from .model import AttendanceRecord, DashboardSummary, SessionStats
from .repository import AttendanceRepository

DASHBOARD_PERIODS = ("today", "week", "all")


def count_by_status(records: Iterable[AttendanceRecord]) -> dict[AttendanceStatus, int]:
    counts = {s: 0 for s in AttendanceStatus}
    for r in records:
        counts[r.status] += 1
    return counts


class StatsService:
    """Read-only summaries, always derived from attendance records."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        sessions: SessionRepository,
        students: StudentRepository,
        *,
        ledger_service: Optional[LedgerService] = None,
    ):
        self._attendance = attendance
        self._sessions = sessions
        self._students = students
        self._ledger_service = ledger_service or LedgerService()

    def get_session_stats(self, session_id: str, *, ledger: Optional[LedgerClient] = None) -> SessionStats:
        session = self._sessions.get_by_id(session_id)
        if not session:
            raise NotFound("Session not found")

        records = self._attendance.list_for_session(session_id)
        ledger_records = self._ledger_service.get_records(ledger, session_id)
        counts = count_by_status(records)

        present = counts[AttendanceStatus.PRESENT]
        rate = (present / session.total_students) * 100 if session.total_students > 0 else 0.0

        return SessionStats(
            session_id=session_id,
            session_name=session.name,
            status=session.status,
            total_students=session.total_students,
            present_count=present,
            absent_count=counts[AttendanceStatus.ABSENT],
            late_count=counts[AttendanceStatus.LATE],
            attendance_rate=round(rate, 2),
            total_records=len(records) + len(ledger_records),
            ledger_records=len(ledger_records),
            created_at=session.created_at,
            updated_at=session.updated_at,
        )

    def dashboard_summary(self, *, period: str = "today", now: Optional[datetime] = None) -> DashboardSummary:
        period = require_non_empty(period, "Period").lower()
        if period not in DASHBOARD_PERIODS:
            raise ValidationError(f"Period must be one of: {', '.join(DASHBOARD_PERIODS)}")

        now = now or now_local()
        if period == "today":
            records = self._attendance.list_recent(since=start_of_day(now))
        elif period == "week":
            records = self._attendance.list_recent(since=days_ago(now, DASHBOARD_WEEK_DAYS))
        else:
            records = self._attendance.list_recent(limit=DASHBOARD_ALL_LIMIT)

        total_students = self._students.count()
        counts = count_by_status(records)
        present = counts[AttendanceStatus.PRESENT]
        rate = round(present / total_students * 100) if total_students > 0 else 0

        return DashboardSummary(
            period=period,
            total_students=total_students,
            present_count=present,
            absent_count=counts[AttendanceStatus.ABSENT],
            attendance_rate=int(rate),
            recent=tuple(list(records)[:DASHBOARD_RECENT_LIMIT]),
        )
