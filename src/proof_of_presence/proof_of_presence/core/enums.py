from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Known account roles. Profiles store the role as a free-form string."""

    TEACHER = "teacher"
    ADMIN = "admin"
    COORDINATOR = "coordinator"
    STUDENT = "student"


class SessionStatus(str, Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    CLOSED = "closed"


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"


class LedgerOutcomeStatus(str, Enum):
    """What happened to the secondary ledger write of one attendance mark."""

    SKIPPED = "skipped"
    RECORDED = "recorded"
    UNAUTHORIZED = "unauthorized"
    FAILED = "failed"
