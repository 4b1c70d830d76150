from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Sequence

from ..core.constants import DEFAULT_ATTENDANCE_METHOD
from ..core.enums import AttendanceStatus, SessionStatus
from ..ledger.model import LedgerEntry, LedgerOutcome, LedgerReceipt


@dataclass(frozen=True)
class AttendanceRecord:
    """One attendance observation. Appended per marking, never replaced."""

    attendance_id: str
    session_id: str
    student_id: str
    status: AttendanceStatus
    timestamp: datetime
    photo_hash: Optional[str] = None
    method: str = DEFAULT_ATTENDANCE_METHOD
    ledger_tx_id: Optional[str] = None


@dataclass(frozen=True)
class MarkAttendanceResult:
    record_id: str
    ledger: LedgerOutcome

    @property
    def ledger_result(self) -> Optional[LedgerReceipt]:
        return self.ledger.receipt


@dataclass(frozen=True)
class SessionAttendance:
    records: Sequence[AttendanceRecord]
    ledger_records: Sequence[LedgerEntry] = ()

    @property
    def total(self) -> int:
        return len(self.records) + len(self.ledger_records)


@dataclass(frozen=True)
class SessionStats:
    """Read model recomputed from attendance records (stored counters are ignored)."""

    session_id: str
    session_name: str
    status: SessionStatus
    total_students: int
    present_count: int
    absent_count: int
    late_count: int
    attendance_rate: float
    total_records: int
    ledger_records: int
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class DashboardSummary:
    period: str
    total_students: int
    present_count: int
    absent_count: int
    attendance_rate: int
    recent: Sequence[AttendanceRecord] = field(default_factory=tuple)
