from __future__ import annotations

import io

import pytest
from PIL import Image

from src.proof_of_presence.proof_of_presence.main import create_app


@pytest.fixture
def client(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container)
    return app.test_client()


@pytest.fixture
def signed_in(client):
    resp = client.post(
        "/api/auth/signup",
        json={"email": "t@school.edu", "password": "secret1", "role": "teacher", "displayName": "Teacher"},
    )
    assert resp.status_code == 201
    return client


def _png() -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (8, 8), (10, 20, 30)).save(buf, format="PNG")
    return buf.getvalue()


def test_endpoints_require_login(client):
    resp = client.get("/api/sessions")

    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_login_logout_cycle(signed_in):
    assert signed_in.post("/api/auth/logout").status_code == 200
    assert signed_in.get("/api/auth/me").status_code == 401

    bad = signed_in.post("/api/auth/login", json={"email": "t@school.edu", "password": "nope123"})
    assert bad.status_code == 401
    assert bad.get_json()["message"] == "Invalid email or password"

    good = signed_in.post("/api/auth/login", json={"email": "t@school.edu", "password": "secret1"})
    assert good.status_code == 200
    assert signed_in.get("/api/auth/me").get_json()["data"]["role"] == "teacher"


def test_role_update_needs_admin(signed_in):
    me = signed_in.get("/api/auth/me").get_json()["data"]

    resp = signed_in.put(f"/api/users/{me['user_id']}/role", json={"role": "admin"})
    assert resp.status_code == 403


def test_session_lifecycle_over_http(signed_in):
    student = signed_in.post(
        "/api/students", json={"firstName": "Ada", "lastName": "Lovelace", "rollNumber": "R-1", "class": "CS1"}
    ).get_json()["data"]

    created = signed_in.post("/api/sessions", json={"name": "Math101", "course": "Math"})
    assert created.status_code == 201
    session = created.get_json()["data"]
    assert session["status"] == "active"
    sid = session["session_id"]

    roster = signed_in.post(f"/api/sessions/{sid}/students", json={"studentId": student["student_id"]})
    assert roster.status_code == 201
    assert roster.get_json()["data"]["full_name"] == "Ada Lovelace"

    marked = signed_in.post(
        f"/api/sessions/{sid}/attendance", json={"studentId": student["student_id"], "status": "present"}
    )
    assert marked.status_code == 201
    body = marked.get_json()["data"]
    assert body["recordId"]
    assert body["ledgerStatus"] == "skipped"
    assert body["ledgerResult"] is None

    stats = signed_in.get(f"/api/sessions/{sid}/stats").get_json()["data"]
    assert stats["present_count"] == 1
    assert stats["attendance_rate"] == 100.0

    listed = signed_in.get(f"/api/sessions/{sid}/attendance").get_json()["data"]
    assert listed["total"] == 1

    assert signed_in.post(f"/api/sessions/{sid}/close").get_json()["data"]["status"] == "closed"

    rejected = signed_in.post(f"/api/sessions/{sid}/attendance", json={"studentId": "s1", "status": "present"})
    assert rejected.status_code == 409
    assert rejected.get_json()["message"] == "Cannot mark attendance in inactive session"

    reopened = signed_in.put(f"/api/sessions/{sid}/status", json={"status": "active"})
    assert reopened.status_code == 409


def test_error_statuses(signed_in):
    assert signed_in.get("/api/sessions/missing").status_code == 404
    assert signed_in.post("/api/sessions", json={"name": "", "course": "Math"}).status_code == 400

    sid = signed_in.post("/api/sessions", json={"name": "Math101", "course": "Math"}).get_json()["data"]["session_id"]
    bad_status = signed_in.post(f"/api/sessions/{sid}/attendance", json={"studentId": "s1", "status": "excused"})
    assert bad_status.status_code == 400


def test_multipart_mark_stores_photo_hash(signed_in, attendance_repo):
    sid = signed_in.post("/api/sessions", json={"name": "Math101", "course": "Math"}).get_json()["data"]["session_id"]

    resp = signed_in.post(
        f"/api/sessions/{sid}/attendance",
        data={"studentId": "s1", "status": "late", "photo": (io.BytesIO(bytes([1, 2, 3])), "face.jpg")},
        content_type="multipart/form-data",
    )

    assert resp.status_code == 201
    record = attendance_repo.get_by_id(resp.get_json()["data"]["recordId"])
    assert record.photo_hash == "402"


def test_vision_analyze_without_api_key_uses_stand_in(signed_in):
    resp = signed_in.post(
        "/api/vision/analyze",
        data={"image": (io.BytesIO(_png()), "face.png")},
        content_type="multipart/form-data",
    )

    data = resp.get_json()["data"]
    assert resp.status_code == 200
    assert data["is_stand_in"] is True
    assert data["face_count"] == 1

    assert signed_in.post("/api/vision/analyze").status_code == 400


def test_dashboard_and_student_listing(signed_in):
    signed_in.post("/api/students", json={"firstName": "Ada", "lastName": "Lovelace", "rollNumber": "R-1", "class": "CS1"})
    signed_in.post("/api/students", json={"firstName": "Alan", "lastName": "Turing", "rollNumber": "R-2", "class": "CS2"})

    summary = signed_in.get("/api/dashboard?period=week").get_json()["data"]
    assert summary["total_students"] == 2
    assert summary["period"] == "week"

    found = signed_in.get("/api/students?search=turing").get_json()["data"]
    assert [s["full_name"] for s in found] == ["Alan Turing"]
    assert sorted(signed_in.get("/api/students/classes").get_json()["data"]) == ["CS1", "CS2"]

    assert signed_in.get("/api/dashboard?period=year").status_code == 400


def test_mark_without_student_id_is_rejected(signed_in, attendance_repo):
    sid = signed_in.post("/api/sessions", json={"name": "Math101", "course": "Math"}).get_json()["data"]["session_id"]

    resp = signed_in.post(f"/api/sessions/{sid}/attendance", json={"status": "present"})

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Student is required"
    assert attendance_repo.writes == 0
