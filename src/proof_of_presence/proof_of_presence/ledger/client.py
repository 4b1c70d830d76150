from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.exceptions import AuthorizationError, CollaboratorUnavailable
from .model import LedgerEntry, LedgerReceipt, LedgerRecord, LedgerStats


class LedgerClient(Protocol):
    """Secondary write target (smart contract reached through a wallet bridge)."""

    def is_authorized(self) -> bool:
        raise NotImplementedError

    def add_attendance_record(self, record: LedgerRecord) -> LedgerReceipt:
        raise NotImplementedError

    def get_attendance_records(self, session_id: Optional[str] = None) -> Sequence[LedgerEntry]:
        raise NotImplementedError

    def get_stats(self) -> LedgerStats:
        raise NotImplementedError

    def verify_record(self, *, student_id: str, session_id: str, timestamp: str) -> Optional[LedgerEntry]:
        raise NotImplementedError


class ContractHandle(Protocol):
    address: str

    def call(self, method: str, args: Sequence[Any] = ()) -> Any:
        raise NotImplementedError


def _get(obj: Any, key: str, default: Any = None) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(key, default)
    return getattr(obj, key, default)


def _to_entry(raw: Any) -> LedgerEntry:
    block = _get(raw, "blockNumber")
    return LedgerEntry(
        student_id=str(_get(raw, "studentId")),
        session_id=str(_get(raw, "sessionId")),
        timestamp=str(_get(raw, "timestamp")),
        status=str(_get(raw, "status")),
        photo_hash=_get(raw, "photoHash"),
        block_number=int(block) if block is not None else None,
        transaction_id=_get(raw, "transactionHash"),
    )


class ContractLedgerClient(LedgerClient):
    """Adapter over a wallet-bridge contract handle exposing call(method, args).

    Writes are only allowed from the expected wallet (case-insensitive match).
    """

    def __init__(
        self,
        contract: Optional[ContractHandle],
        *,
        connected_address: Optional[str],
        expected_address: Optional[str],
    ):
        self._contract = contract
        self._connected = (connected_address or "").lower()
        self._expected = (expected_address or "").lower()

    def _require_contract(self) -> ContractHandle:
        if self._contract is None:
            raise CollaboratorUnavailable("Smart contract not available")
        return self._contract

    def is_authorized(self) -> bool:
        return bool(self._connected) and (not self._expected or self._connected == self._expected)

    def add_attendance_record(self, record: LedgerRecord) -> LedgerReceipt:
        if not self.is_authorized():
            raise AuthorizationError("Connected wallet is not allowed to write attendance records")

        result = self._require_contract().call(
            "addAttendanceRecord",
            [record.student_id, record.session_id, record.timestamp, record.status, record.photo_hash],
        )
        tx_hash = _get(_get(result, "receipt", {}), "transactionHash")
        if not tx_hash:
            raise CollaboratorUnavailable("Ledger did not return a transaction hash")
        return LedgerReceipt(record_id=record.record_id, transaction_id=str(tx_hash))

    def get_attendance_records(self, session_id: Optional[str] = None) -> Sequence[LedgerEntry]:
        contract = self._require_contract()
        if session_id:
            raw = contract.call("getAttendanceRecordsBySession", [session_id])
        else:
            raw = contract.call("getAllAttendanceRecords")
        return [_to_entry(r) for r in raw or []]

    def get_stats(self) -> LedgerStats:
        contract = self._require_contract()
        return LedgerStats(
            total_records=int(contract.call("getTotalAttendanceRecords")),
            last_block_number=int(contract.call("getLastBlockNumber")),
            contract_address=contract.address,
            is_connected=True,
        )

    def verify_record(self, *, student_id: str, session_id: str, timestamp: str) -> Optional[LedgerEntry]:
        raw = self._require_contract().call("getAttendanceRecord", [student_id, session_id, timestamp])
        if not _get(raw, "exists"):
            return None
        return _to_entry(_get(raw, "data"))
