from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_local
from ..common.hashing import photo_fingerprint
from ..common.validators import parse_enum, require_non_empty
from ..core.enums import AttendanceStatus
from ..core.exceptions import CollaboratorUnavailable, InvalidState, NotFound
from ..ledger.client import LedgerClient
from ..ledger.model import LedgerOutcome
from ..ledger.service import LedgerService
from ..sessions.model import Session
from ..sessions.repository import SessionRepository
from .model import MarkAttendanceResult, SessionAttendance
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_COUNTER_FOR_STATUS = {
    AttendanceStatus.PRESENT: "present_count",
    AttendanceStatus.ABSENT: "absent_count",
}


class AttendanceService:
    """Use case: record attendance observations for a session.

    The attendance write is the durability boundary. Mirroring to the ledger and
    bumping the session counters happen after it and never undo it.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        sessions: SessionRepository,
        *,
        ledger_service: Optional[LedgerService] = None,
    ):
        self._attendance = attendance
        self._sessions = sessions
        self._ledger_service = ledger_service or LedgerService()

    def _get_session(self, session_id: str) -> Session:
        session = self._sessions.get_by_id(session_id)
        if not session:
            raise NotFound("Session not found")
        return session

    def mark_attendance(
        self,
        session_id: str,
        student_id: str,
        status,
        *,
        photo: Optional[bytes] = None,
        ledger: Optional[LedgerClient] = None,
        now: Optional[datetime] = None,
    ) -> MarkAttendanceResult:
        status = parse_enum(AttendanceStatus, status, "Status")
        student_id = require_non_empty(student_id, "Student")
        session = self._get_session(session_id)
        if not session.is_active:
            raise InvalidState("Cannot mark attendance in inactive session")

        photo_hash = photo_fingerprint(photo) if photo else None
        now = now or now_local()

        record_id = self._attendance.create(
            session_id=session_id,
            student_id=student_id,
            status=status,
            timestamp=now,
            photo_hash=photo_hash,
        )
        logger.info("Marked %s as %s in session %s (record %s)", student_id, status.value, session_id, record_id)

        outcome = self._mirror_to_ledger(
            ledger,
            record_id=record_id,
            session_id=session_id,
            student_id=student_id,
            status=status,
            timestamp=now,
            photo_hash=photo_hash,
        )
        self._bump_counter(session, status, now)

        return MarkAttendanceResult(record_id=record_id, ledger=outcome)

    def _mirror_to_ledger(
        self,
        ledger: Optional[LedgerClient],
        *,
        record_id: str,
        session_id: str,
        student_id: str,
        status: AttendanceStatus,
        timestamp: datetime,
        photo_hash: Optional[str],
    ) -> LedgerOutcome:
        if ledger is None:
            return LedgerOutcome.skipped()

        try:
            if not ledger.is_authorized():
                logger.warning("Ledger write skipped for record %s: caller is not authorized", record_id)
                return LedgerOutcome.unauthorized("Caller is not authorized to write to the ledger")

            entry = self._ledger_service.build_record(
                student_id=student_id,
                session_id=session_id,
                timestamp=timestamp.isoformat(),
                status=status.value,
                photo_hash=photo_hash,
            )
            receipt = ledger.add_attendance_record(entry)
        except Exception as exc:
            logger.warning("Ledger storage failed, but record %s was saved: %s", record_id, exc)
            return LedgerOutcome.failed(str(exc))

        try:
            self._attendance.attach_ledger_transaction(record_id, receipt.transaction_id)
        except CollaboratorUnavailable as exc:
            logger.warning("Could not attach ledger transaction to record %s: %s", record_id, exc)
        return LedgerOutcome.recorded(receipt)

    def _bump_counter(self, session: Session, status: AttendanceStatus, now: datetime) -> None:
        # Read-then-write without a transaction; concurrent marks may drift the cache.
        fields: dict[str, object] = {"updated_at": now}
        counter = _COUNTER_FOR_STATUS.get(status)
        if counter:
            fields[counter] = getattr(session, counter) + 1
        try:
            self._sessions.update(session.session_id, fields)
        except CollaboratorUnavailable as exc:
            logger.warning("Session %s counters not updated: %s", session.session_id, exc)

    def get_session_attendance(self, session_id: str, *, ledger: Optional[LedgerClient] = None) -> SessionAttendance:
        records = self._attendance.list_for_session(session_id)
        ledger_records = self._ledger_service.get_records(ledger, session_id)
        return SessionAttendance(records=list(records), ledger_records=list(ledger_records))
