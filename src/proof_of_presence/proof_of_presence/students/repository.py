from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Student, StudentDetails


class StudentRepository(Protocol):
    def get_by_id(self, student_id: str) -> Optional[Student]:
        raise NotImplementedError

    def create(self, details: StudentDetails, *, now: datetime) -> str:
        raise NotImplementedError

    def update(self, student_id: str, details: StudentDetails, *, now: datetime) -> bool:
        raise NotImplementedError

    def delete(self, student_id: str) -> bool:
        """Delete the student document only (attendance/roster rows are kept)."""

        raise NotImplementedError

    def list_all(self) -> Sequence[Student]:
        """All students, newest first."""

        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError
