from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.hashing import string_fingerprint
from .client import LedgerClient
from .model import LedgerEntry, LedgerRecord, LedgerStats, LedgerVerification

logger = logging.getLogger(__name__)


class LedgerService:
    """Helpers around an optional LedgerClient. Reads never raise."""

    @staticmethod
    def record_id_for(student_id: str, session_id: str, timestamp: str) -> str:
        return string_fingerprint(f"{student_id}-{session_id}-{timestamp}")

    def build_record(
        self,
        *,
        student_id: str,
        session_id: str,
        timestamp: str,
        status: str,
        photo_hash: Optional[str],
        now: Optional[datetime] = None,
    ) -> LedgerRecord:
        return LedgerRecord(
            student_id=student_id,
            session_id=session_id,
            timestamp=timestamp,
            status=status,
            photo_hash=photo_hash,
            record_id=self.record_id_for(student_id, session_id, timestamp),
            created_at=now or now_local(),
        )

    def get_records(self, client: Optional[LedgerClient], session_id: Optional[str] = None) -> Sequence[LedgerEntry]:
        if client is None:
            return []
        try:
            return list(client.get_attendance_records(session_id))
        except Exception as exc:
            logger.warning("Failed to read ledger attendance for session %s: %s", session_id, exc)
            return []

    def get_stats(self, client: Optional[LedgerClient]) -> LedgerStats:
        if client is None:
            return LedgerStats()
        try:
            return client.get_stats()
        except Exception as exc:
            logger.warning("Failed to read ledger stats: %s", exc)
            return LedgerStats()

    def verify_record(
        self,
        client: Optional[LedgerClient],
        *,
        student_id: str,
        session_id: str,
        timestamp: str,
    ) -> LedgerVerification:
        if client is None:
            return LedgerVerification(exists=False)
        try:
            entry = client.verify_record(student_id=student_id, session_id=session_id, timestamp=timestamp)
        except Exception as exc:
            logger.warning("Failed to verify ledger record: %s", exc)
            return LedgerVerification(exists=False)
        return LedgerVerification(exists=entry is not None, entry=entry)
