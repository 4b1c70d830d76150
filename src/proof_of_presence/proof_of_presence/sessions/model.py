from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import SessionStatus


@dataclass(frozen=True)
class Session:
    """An attendance-taking event (one class meeting).

    The counters are an increment-on-write cache; statistics recompute them
    from attendance records.
    """

    session_id: str
    name: str
    course: str
    status: SessionStatus
    created_at: datetime
    updated_at: datetime
    instructor: Optional[str] = None
    description: Optional[str] = None
    max_students: int = 50
    total_students: int = 0
    present_count: int = 0
    absent_count: int = 0
    closed_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status == SessionStatus.ACTIVE


@dataclass(frozen=True)
class SessionStudent:
    """Roster membership with denormalized student fields."""

    session_student_id: str
    session_id: str
    student_id: str
    added_at: datetime
    full_name: Optional[str] = None
    roll_number: Optional[str] = None
    class_name: Optional[str] = None
