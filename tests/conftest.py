from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional

import pytest

from src.proof_of_presence.proof_of_presence.attendance.model import AttendanceRecord
from src.proof_of_presence.proof_of_presence.container import build_services
from src.proof_of_presence.proof_of_presence.core.constants import DEFAULT_ATTENDANCE_METHOD
from src.proof_of_presence.proof_of_presence.core.enums import SessionStatus
from src.proof_of_presence.proof_of_presence.core.exceptions import CollaboratorUnavailable
from src.proof_of_presence.proof_of_presence.ledger.model import LedgerEntry, LedgerReceipt, LedgerStats
from src.proof_of_presence.proof_of_presence.sessions.model import Session, SessionStudent
from src.proof_of_presence.proof_of_presence.students.model import Student, StudentDetails
from src.proof_of_presence.proof_of_presence.users.model import User


class _Ids:
    def __init__(self, prefix: str):
        self._prefix = prefix
        self._n = 0

    def next(self) -> str:
        self._n += 1
        return f"{self._prefix}-{self._n}"


class InMemoryUsers:
    def __init__(self):
        self.users: dict[str, User] = {}
        self._ids = _Ids("user")

    def get_by_id(self, user_id):
        return self.users.get(user_id)

    def get_by_email(self, email):
        return next((u for u in self.users.values() if u.email == email), None)

    def create_user(self, *, email, display_name, password_hash, role, created_at):
        user_id = self._ids.next()
        self.users[user_id] = User(
            user_id=user_id,
            email=email,
            display_name=display_name,
            password_hash=password_hash,
            role=role,
            created_at=created_at,
        )
        return user_id

    def update_role(self, user_id, role):
        if user_id not in self.users:
            return False
        self.users[user_id] = replace(self.users[user_id], role=role)
        return True


class InMemoryStudents:
    def __init__(self):
        self.students: dict[str, Student] = {}
        self._ids = _Ids("stu")

    def get_by_id(self, student_id):
        return self.students.get(student_id)

    def _build(self, student_id: str, details: StudentDetails, created_at: datetime, updated_at: datetime) -> Student:
        return Student(
            student_id=student_id,
            first_name=details.first_name,
            last_name=details.last_name,
            full_name=details.full_name,
            roll_number=details.roll_number,
            created_at=created_at,
            updated_at=updated_at,
            email=details.email,
            class_name=details.class_name,
            section=details.section,
            phone=details.phone,
            address=details.address,
            guardian_name=details.guardian_name,
            guardian_phone=details.guardian_phone,
            photo_url=details.photo_url,
        )

    def create(self, details, *, now):
        student_id = self._ids.next()
        self.students[student_id] = self._build(student_id, details, now, now)
        return student_id

    def update(self, student_id, details, *, now):
        current = self.students.get(student_id)
        if not current:
            return False
        self.students[student_id] = self._build(student_id, details, current.created_at, now)
        return True

    def delete(self, student_id):
        return self.students.pop(student_id, None) is not None

    def list_all(self):
        # insertion order breaks created_at ties
        items = list(self.students.values())[::-1]
        return sorted(items, key=lambda s: s.created_at, reverse=True)

    def count(self):
        return len(self.students)


class InMemorySessions:
    def __init__(self):
        self.sessions: dict[str, Session] = {}
        self.updates: list[tuple[str, dict]] = []
        self.fail_updates = False
        self._ids = _Ids("sess")

    def get_by_id(self, session_id):
        return self.sessions.get(session_id)

    def create(self, *, name, course, instructor, description, max_students, now):
        session_id = self._ids.next()
        self.sessions[session_id] = Session(
            session_id=session_id,
            name=name,
            course=course,
            status=SessionStatus.ACTIVE,
            created_at=now,
            updated_at=now,
            instructor=instructor,
            description=description,
            max_students=max_students,
        )
        return session_id

    def list_all(self, *, status=None):
        items = [s for s in list(self.sessions.values())[::-1] if status is None or s.status == status]
        return sorted(items, key=lambda s: s.created_at, reverse=True)

    def update(self, session_id, fields):
        if self.fail_updates:
            raise CollaboratorUnavailable("Database error: connection lost")
        self.updates.append((session_id, dict(fields)))
        current = self.sessions.get(session_id)
        if not current:
            return False
        self.sessions[session_id] = replace(current, **fields)
        return True


class InMemoryRoster:
    def __init__(self):
        self.rows: list[SessionStudent] = []
        self._ids = _Ids("roster")

    def add(self, *, session_id, student_id, full_name, roll_number, class_name, added_at):
        row_id = self._ids.next()
        self.rows.append(
            SessionStudent(
                session_student_id=row_id,
                session_id=session_id,
                student_id=student_id,
                added_at=added_at,
                full_name=full_name,
                roll_number=roll_number,
                class_name=class_name,
            )
        )
        return row_id

    def remove(self, *, session_id, student_id):
        keep = [r for r in self.rows if not (r.session_id == session_id and r.student_id == student_id)]
        removed = len(self.rows) - len(keep)
        self.rows = keep
        return removed

    def list_for_session(self, session_id):
        return sorted((r for r in self.rows if r.session_id == session_id), key=lambda r: r.added_at)


class InMemoryAttendance:
    def __init__(self):
        self.records: dict[str, AttendanceRecord] = {}
        self.writes = 0
        self.fail_create = False
        self.fail_attach = False
        self._ids = _Ids("att")

    def create(self, *, session_id, student_id, status, timestamp, photo_hash=None, method=DEFAULT_ATTENDANCE_METHOD):
        if self.fail_create:
            raise CollaboratorUnavailable("Persistence store call failed: connection lost")
        self.writes += 1
        attendance_id = self._ids.next()
        self.records[attendance_id] = AttendanceRecord(
            attendance_id=attendance_id,
            session_id=session_id,
            student_id=student_id,
            status=status,
            timestamp=timestamp,
            photo_hash=photo_hash,
            method=method,
        )
        return attendance_id

    def get_by_id(self, attendance_id):
        return self.records.get(attendance_id)

    def list_for_session(self, session_id):
        return sorted((r for r in self.records.values() if r.session_id == session_id), key=lambda r: r.timestamp)

    def list_recent(self, *, since=None, limit=None):
        items = [r for r in self.records.values() if since is None or r.timestamp >= since]
        items.sort(key=lambda r: r.timestamp, reverse=True)
        return items[:limit] if limit else items

    def attach_ledger_transaction(self, attendance_id, transaction_id):
        if self.fail_attach:
            raise CollaboratorUnavailable("Database error: connection lost")
        current = self.records.get(attendance_id)
        if not current:
            return False
        self.records[attendance_id] = replace(current, ledger_tx_id=transaction_id)
        return True


class RecordingLedger:
    """Authorized ledger that keeps everything it is sent."""

    def __init__(self, entries: Optional[list[LedgerEntry]] = None):
        self.written = []
        self.entries = list(entries or [])

    def is_authorized(self):
        return True

    def add_attendance_record(self, record):
        self.written.append(record)
        return LedgerReceipt(record_id=record.record_id, transaction_id=f"0xtx{len(self.written)}")

    def get_attendance_records(self, session_id=None):
        return [e for e in self.entries if session_id is None or e.session_id == session_id]

    def get_stats(self):
        return LedgerStats(total_records=len(self.entries), last_block_number=7, contract_address="0xc0ffee", is_connected=True)

    def verify_record(self, *, student_id, session_id, timestamp):
        return next(
            (
                e
                for e in self.entries
                if (e.student_id, e.session_id, e.timestamp) == (student_id, session_id, timestamp)
            ),
            None,
        )


class ThrowingLedger(RecordingLedger):
    def add_attendance_record(self, record):
        raise RuntimeError("User rejected the transaction")

    def get_attendance_records(self, session_id=None):
        raise RuntimeError("Contract not initialized")

    def get_stats(self):
        raise RuntimeError("Contract not initialized")


class UnauthorizedLedger(RecordingLedger):
    def is_authorized(self):
        return False


class DisconnectedLedger(RecordingLedger):
    def is_authorized(self):
        raise RuntimeError("wallet bridge disconnected")


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 2, 9, 0, 0)


@pytest.fixture
def users_repo():
    return InMemoryUsers()


@pytest.fixture
def students_repo():
    return InMemoryStudents()


@pytest.fixture
def sessions_repo():
    return InMemorySessions()


@pytest.fixture
def roster_repo():
    return InMemoryRoster()


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance()


@pytest.fixture
def container(users_repo, students_repo, sessions_repo, roster_repo, attendance_repo):
    return build_services(
        users_repo=users_repo,
        students_repo=students_repo,
        sessions_repo=sessions_repo,
        roster_repo=roster_repo,
        attendance_repo=attendance_repo,
    )


@pytest.fixture
def add_student(container, fixed_now):
    def _add(first_name="Ada", last_name="Lovelace", roll_number="R-001", class_name="CS1", **extra):
        details = StudentDetails(
            first_name=first_name, last_name=last_name, roll_number=roll_number, class_name=class_name, **extra
        )
        return container.student_service.create_student(details, now=fixed_now)

    return _add


@pytest.fixture
def recording_ledger():
    return RecordingLedger()


@pytest.fixture
def throwing_ledger():
    return ThrowingLedger()


@pytest.fixture
def unauthorized_ledger():
    return UnauthorizedLedger()


@pytest.fixture
def disconnected_ledger():
    return DisconnectedLedger()
