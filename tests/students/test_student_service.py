from __future__ import annotations

from datetime import timedelta

import pytest

from src.proof_of_presence.proof_of_presence.core.exceptions import NotFound, ValidationError
from src.proof_of_presence.proof_of_presence.students.model import StudentDetails


def test_create_student_trims_and_derives_full_name(container, fixed_now):
    student = container.student_service.create_student(
        StudentDetails(first_name=" Grace ", last_name="Hopper", roll_number="R-7", email="Grace@Navy.MIL", phone=" "),
        now=fixed_now,
    )

    assert student.full_name == "Grace Hopper"
    assert student.email == "grace@navy.mil"
    assert student.phone is None
    assert student.created_at == fixed_now


@pytest.mark.parametrize("field", ["first_name", "last_name", "roll_number"])
def test_create_student_requires_identity_fields(container, students_repo, field):
    values = {"first_name": "Ada", "last_name": "Lovelace", "roll_number": "R-1"}
    values[field] = ""

    with pytest.raises(ValidationError, match="is required"):
        container.student_service.create_student(StudentDetails(**values))
    assert students_repo.count() == 0


def test_update_keeps_created_at(container, add_student, fixed_now):
    student = add_student()
    later = fixed_now + timedelta(days=1)

    updated = container.student_service.update_student(
        student.student_id,
        StudentDetails(first_name="Ada", last_name="King", roll_number="R-001", class_name="CS2"),
        now=later,
    )

    assert updated.full_name == "Ada King"
    assert updated.class_name == "CS2"
    assert updated.created_at == fixed_now
    assert updated.updated_at == later


def test_update_and_delete_missing_student(container):
    details = StudentDetails(first_name="A", last_name="B", roll_number="R")
    with pytest.raises(NotFound, match="Student not found"):
        container.student_service.update_student("ghost", details)
    with pytest.raises(NotFound, match="Student not found"):
        container.student_service.delete_student("ghost")


def test_delete_student(container, add_student):
    student = add_student()
    container.student_service.delete_student(student.student_id)

    with pytest.raises(NotFound):
        container.student_service.get_student(student.student_id)


def test_search_and_class_filter(container, add_student):
    add_student(first_name="Ada", last_name="Lovelace", roll_number="R-1", class_name="CS1", email="ada@example.com")
    add_student(first_name="Alan", last_name="Turing", roll_number="R-2", class_name="CS2")
    add_student(first_name="Grace", last_name="Hopper", roll_number="X-3", class_name="CS1")

    svc = container.student_service
    assert [s.full_name for s in svc.list_students(search="TURING")] == ["Alan Turing"]
    assert [s.full_name for s in svc.list_students(search="ada@")] == ["Ada Lovelace"]
    assert {s.full_name for s in svc.list_students(search="r-")} == {"Ada Lovelace", "Alan Turing"}
    assert {s.full_name for s in svc.list_students(class_name="CS1")} == {"Ada Lovelace", "Grace Hopper"}
    assert svc.list_students(search="hopper", class_name="CS2") == []


def test_list_newest_first_and_classes(container, fixed_now):
    svc = container.student_service
    svc.create_student(StudentDetails("A", "One", "R-1", class_name="CS2"), now=fixed_now)
    svc.create_student(StudentDetails("B", "Two", "R-2", class_name="CS1"), now=fixed_now + timedelta(minutes=1))
    svc.create_student(StudentDetails("C", "Three", "R-3"), now=fixed_now + timedelta(minutes=2))

    assert [s.roll_number for s in svc.list_students()] == ["R-3", "R-2", "R-1"]
    assert svc.list_classes() == ["CS1", "CS2"]
