from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import optional_text, require_non_empty
from ..core.exceptions import NotFound
from .model import Student, StudentDetails
from .repository import StudentRepository

logger = logging.getLogger(__name__)


class StudentService:
    """Use case: maintain the global student list."""

    def __init__(self, students: StudentRepository):
        self._students = students

    @staticmethod
    def _clean(details: StudentDetails) -> StudentDetails:
        email = optional_text(details.email)
        return StudentDetails(
            first_name=require_non_empty(details.first_name, "First name"),
            last_name=require_non_empty(details.last_name, "Last name"),
            roll_number=require_non_empty(details.roll_number, "Roll number"),
            email=email.lower() if email else None,
            class_name=optional_text(details.class_name),
            section=optional_text(details.section),
            phone=optional_text(details.phone),
            address=optional_text(details.address),
            guardian_name=optional_text(details.guardian_name),
            guardian_phone=optional_text(details.guardian_phone),
            photo_url=optional_text(details.photo_url),
        )

    def create_student(self, details: StudentDetails, *, now: Optional[datetime] = None) -> Student:
        details = self._clean(details)
        student_id = self._students.create(details, now=now or now_local())
        logger.info("Added student %s (%s)", student_id, details.roll_number)
        return self.get_student(student_id)

    def update_student(self, student_id: str, details: StudentDetails, *, now: Optional[datetime] = None) -> Student:
        details = self._clean(details)
        if not self._students.update(student_id, details, now=now or now_local()):
            raise NotFound("Student not found")
        return self.get_student(student_id)

    def delete_student(self, student_id: str) -> None:
        # Attendance and roster rows keep pointing at the removed id.
        if not self._students.delete(student_id):
            raise NotFound("Student not found")
        logger.info("Deleted student %s", student_id)

    def get_student(self, student_id: str) -> Student:
        student = self._students.get_by_id(student_id)
        if not student:
            raise NotFound("Student not found")
        return student

    def list_students(self, *, search: Optional[str] = None, class_name: Optional[str] = None) -> Sequence[Student]:
        term = (search or "").strip().lower()
        out = []
        for s in self._students.list_all():
            if class_name and s.class_name != class_name:
                continue
            if term and not any(term in (v or "").lower() for v in (s.full_name, s.roll_number, s.email)):
                continue
            out.append(s)
        return out

    def list_classes(self) -> list[str]:
        seen: list[str] = []
        for s in self._students.list_all():
            if s.class_name and s.class_name not in seen:
                seen.append(s.class_name)
        return seen
