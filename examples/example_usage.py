"""Drive a session through its lifecycle with the service layer only (no Flask)."""

import importlib

from config import get_settings_module

from src.proof_of_presence.proof_of_presence.container import build_container
from src.proof_of_presence.proof_of_presence.students.model import StudentDetails


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    student = container.student_service.create_student(
        StudentDetails(first_name="Ada", last_name="Lovelace", roll_number="R-001", class_name="CS1")
    )
    session = container.session_service.create_session(name="Math101", course="Math")
    container.session_service.add_student_to_session(session.session_id, student.student_id)

    result = container.attendance_service.mark_attendance(session.session_id, student.student_id, "present")
    print("record:", result.record_id, "ledger:", result.ledger.status.value)

    container.session_service.close_session(session.session_id)
    print(container.stats_service.get_session_stats(session.session_id))


if __name__ == "__main__":
    main()
