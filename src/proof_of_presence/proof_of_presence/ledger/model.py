from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import LedgerOutcomeStatus


@dataclass(frozen=True)
class LedgerRecord:
    """Attendance event as mirrored to the ledger."""

    student_id: str
    session_id: str
    timestamp: str
    status: str
    photo_hash: Optional[str]
    record_id: str
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class LedgerReceipt:
    record_id: str
    transaction_id: str


@dataclass(frozen=True)
class LedgerEntry:
    """A record read back from the ledger."""

    student_id: str
    session_id: str
    timestamp: str
    status: str
    photo_hash: Optional[str] = None
    block_number: Optional[int] = None
    transaction_id: Optional[str] = None


@dataclass(frozen=True)
class LedgerOutcome:
    """Result of the advisory ledger write.

    The primary store is authoritative: a mark succeeds whatever this says.
    """

    status: LedgerOutcomeStatus
    receipt: Optional[LedgerReceipt] = None
    error: Optional[str] = None

    @classmethod
    def skipped(cls) -> "LedgerOutcome":
        return cls(status=LedgerOutcomeStatus.SKIPPED)

    @classmethod
    def recorded(cls, receipt: LedgerReceipt) -> "LedgerOutcome":
        return cls(status=LedgerOutcomeStatus.RECORDED, receipt=receipt)

    @classmethod
    def unauthorized(cls, error: str) -> "LedgerOutcome":
        return cls(status=LedgerOutcomeStatus.UNAUTHORIZED, error=error)

    @classmethod
    def failed(cls, error: str) -> "LedgerOutcome":
        return cls(status=LedgerOutcomeStatus.FAILED, error=error)


@dataclass(frozen=True)
class LedgerStats:
    total_records: int = 0
    last_block_number: int = 0
    contract_address: Optional[str] = None
    is_connected: bool = False


@dataclass(frozen=True)
class LedgerVerification:
    exists: bool
    entry: Optional[LedgerEntry] = None
