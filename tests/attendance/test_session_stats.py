from __future__ import annotations

from dataclasses import replace
from datetime import timedelta

import pytest

from src.proof_of_presence.proof_of_presence.core.enums import SessionStatus
from src.proof_of_presence.proof_of_presence.core.exceptions import InvalidState, NotFound, ValidationError
from src.proof_of_presence.proof_of_presence.ledger.model import LedgerEntry


def test_closed_session_rejects_marking(container, attendance_repo, fixed_now):
    session = container.session_service.create_session(name="Math101", course="Math", now=fixed_now)
    container.session_service.close_session(session.session_id, now=fixed_now)

    with pytest.raises(InvalidState):
        container.attendance_service.mark_attendance(session.session_id, "student1", "present")
    assert attendance_repo.writes == 0


def test_duplicate_present_marks_are_counted(container, fixed_now):
    session = container.session_service.create_session(name="Math101", course="Math", now=fixed_now)
    container.attendance_service.mark_attendance(session.session_id, "s1", "present", now=fixed_now)
    container.attendance_service.mark_attendance(
        session.session_id, "s1", "present", now=fixed_now + timedelta(minutes=1)
    )

    stats = container.stats_service.get_session_stats(session.session_id)
    assert stats.present_count == 2
    assert stats.total_records == 2


def test_throwing_ledger_keeps_record_retrievable(container, attendance_repo, fixed_now, throwing_ledger):
    session = container.session_service.create_session(name="Math101", course="Math", now=fixed_now)

    result = container.attendance_service.mark_attendance(
        session.session_id, "s1", "present", ledger=throwing_ledger, now=fixed_now
    )

    assert result.record_id
    assert result.ledger_result is None
    assert attendance_repo.get_by_id(result.record_id).student_id == "s1"


def test_stats_recomputed_from_records_not_counters(container, sessions_repo, add_student, fixed_now):
    svc = container.session_service
    session = svc.create_session(name="Math101", course="Math", now=fixed_now)
    for n in range(4):
        student = add_student(roll_number=f"R-{n}")
        svc.add_student_to_session(session.session_id, student.student_id, now=fixed_now)

    mark = container.attendance_service.mark_attendance
    mark(session.session_id, "s1", "present", now=fixed_now)
    mark(session.session_id, "s2", "absent", now=fixed_now)
    mark(session.session_id, "s3", "late", now=fixed_now)

    # drift the cached counters; stats must not read them
    stored = sessions_repo.sessions[session.session_id]
    sessions_repo.sessions[session.session_id] = replace(stored, present_count=40, absent_count=40)

    stats = container.stats_service.get_session_stats(session.session_id)
    assert stats.session_name == "Math101"
    assert stats.status == SessionStatus.ACTIVE
    assert stats.total_students == 4
    assert (stats.present_count, stats.absent_count, stats.late_count) == (1, 1, 1)
    assert stats.attendance_rate == 25.0
    assert stats.ledger_records == 0


def test_rate_is_rounded_to_two_places(container, add_student, fixed_now):
    svc = container.session_service
    session = svc.create_session(name="Physics", course="Science", now=fixed_now)
    for n in range(3):
        svc.add_student_to_session(session.session_id, add_student(roll_number=f"R-{n}").student_id, now=fixed_now)
    container.attendance_service.mark_attendance(session.session_id, "s1", "present", now=fixed_now)

    assert container.stats_service.get_session_stats(session.session_id).attendance_rate == 33.33


def test_empty_roster_gives_zero_rate(container, fixed_now):
    session = container.session_service.create_session(name="Math101", course="Math", now=fixed_now)
    container.attendance_service.mark_attendance(session.session_id, "s1", "present", now=fixed_now)

    assert container.stats_service.get_session_stats(session.session_id).attendance_rate == 0


def test_ledger_records_count_towards_total(container, fixed_now, recording_ledger):
    session = container.session_service.create_session(name="Math101", course="Math", now=fixed_now)
    container.attendance_service.mark_attendance(session.session_id, "s1", "present", now=fixed_now)
    recording_ledger.entries = [
        LedgerEntry(student_id="s1", session_id=session.session_id, timestamp="t", status="present")
    ]

    stats = container.stats_service.get_session_stats(session.session_id, ledger=recording_ledger)
    assert stats.ledger_records == 1
    assert stats.total_records == 2


def test_stats_for_missing_session(container):
    with pytest.raises(NotFound):
        container.stats_service.get_session_stats("nope")


def test_dashboard_periods(container, add_student, fixed_now):
    add_student(roll_number="R-1")
    add_student(roll_number="R-2")
    session = container.session_service.create_session(name="Math101", course="Math", now=fixed_now)
    mark = container.attendance_service.mark_attendance
    mark(session.session_id, "s1", "present", now=fixed_now)
    mark(session.session_id, "s2", "absent", now=fixed_now - timedelta(days=3))
    mark(session.session_id, "s2", "present", now=fixed_now - timedelta(days=30))

    today = container.stats_service.dashboard_summary(period="today", now=fixed_now)
    assert (today.total_students, today.present_count, today.absent_count) == (2, 1, 0)
    assert today.attendance_rate == 50

    week = container.stats_service.dashboard_summary(period="week", now=fixed_now)
    assert (week.present_count, week.absent_count) == (1, 1)

    everything = container.stats_service.dashboard_summary(period="all", now=fixed_now)
    assert everything.present_count == 2
    assert everything.attendance_rate == 100
    assert [r.timestamp for r in everything.recent] == sorted((r.timestamp for r in everything.recent), reverse=True)


def test_dashboard_rejects_unknown_period(container):
    with pytest.raises(ValidationError, match="Period must be one of"):
        container.stats_service.dashboard_summary(period="month")
