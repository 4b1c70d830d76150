from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, new_document_id
from .model import Student, StudentDetails
from .repository import StudentRepository

_DETAIL_COLUMNS = (
    "first_name",
    "last_name",
    "full_name",
    "roll_number",
    "email",
    "class_name",
    "section",
    "phone",
    "address",
    "guardian_name",
    "guardian_phone",
    "photo_url",
)
_SELECT = "SELECT student_id, " + ", ".join(_DETAIL_COLUMNS) + ", created_at, updated_at FROM students"


def _detail_values(details: StudentDetails) -> tuple:
    return (
        details.first_name,
        details.last_name,
        details.full_name,
        details.roll_number,
        details.email,
        details.class_name,
        details.section,
        details.phone,
        details.address,
        details.guardian_name,
        details.guardian_phone,
        details.photo_url,
    )


def _to_student(r: dict) -> Student:
    return Student(
        student_id=r["student_id"],
        first_name=r["first_name"],
        last_name=r["last_name"],
        full_name=r["full_name"],
        roll_number=r["roll_number"],
        created_at=r["created_at"],
        updated_at=r["updated_at"],
        email=r.get("email"),
        class_name=r.get("class_name"),
        section=r.get("section"),
        phone=r.get("phone"),
        address=r.get("address"),
        guardian_name=r.get("guardian_name"),
        guardian_phone=r.get("guardian_phone"),
        photo_url=r.get("photo_url"),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, student_id: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE student_id=%s", (student_id,))
            r = fetchone(cur)
            return _to_student(r) if r else None

    def create(self, details: StudentDetails, *, now: datetime) -> str:
        student_id = new_document_id()
        placeholders = ",".join(["%s"] * (len(_DETAIL_COLUMNS) + 3))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO students(student_id, {", ".join(_DETAIL_COLUMNS)}, created_at, updated_at)
                VALUES({placeholders})
                """,
                (student_id, *_detail_values(details), now, now),
            )
        return student_id

    def update(self, student_id: str, details: StudentDetails, *, now: datetime) -> bool:
        assignments = ", ".join(f"{c}=%s" for c in _DETAIL_COLUMNS)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE students SET {assignments}, updated_at=%s WHERE student_id=%s",
                (*_detail_values(details), now, student_id),
            )
            return cur.rowcount > 0

    def delete(self, student_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM students WHERE student_id=%s", (student_id,))
            return cur.rowcount > 0

    def list_all(self) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} ORDER BY created_at DESC")
            return [_to_student(r) for r in fetchall(cur)]

    def count(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM students")
            r = fetchone(cur)
            return int(r["n"]) if r else 0
