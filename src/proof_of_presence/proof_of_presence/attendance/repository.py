from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.constants import DEFAULT_ATTENDANCE_METHOD
from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
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
        """Append a record. Returns attendance_id."""

        raise NotImplementedError

    def get_by_id(self, attendance_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_session(self, session_id: str) -> Sequence[AttendanceRecord]:
        """Records of one session ordered by timestamp ASC."""

        raise NotImplementedError

    def list_recent(self, *, since: Optional[datetime] = None, limit: Optional[int] = None) -> Sequence[AttendanceRecord]:
        """Records ordered by timestamp DESC, optionally bounded."""

        raise NotImplementedError

    def attach_ledger_transaction(self, attendance_id: str, transaction_id: str) -> bool:
        raise NotImplementedError
