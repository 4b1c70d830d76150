from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class StudentDetails:
    """Editable fields of a student, as submitted by the registration form."""

    first_name: str
    last_name: str
    roll_number: str
    email: Optional[str] = None
    class_name: Optional[str] = None
    section: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    guardian_name: Optional[str] = None
    guardian_phone: Optional[str] = None
    photo_url: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass(frozen=True)
class Student:
    student_id: str
    first_name: str
    last_name: str
    full_name: str
    roll_number: str
    created_at: datetime
    updated_at: datetime
    email: Optional[str] = None
    class_name: Optional[str] = None
    section: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    guardian_name: Optional[str] = None
    guardian_phone: Optional[str] = None
    photo_url: Optional[str] = None
