from __future__ import annotations

from flask import Flask, request

from ..common.http import api_view, json_body, login_required, ok
from ..core.constants import DEFAULT_MAX_STUDENTS
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/sessions", methods=["GET"], endpoint="list_sessions")
    @login_required
    @api_view
    def list_sessions():
        active_only = request.args.get("active", "").lower() in {"1", "true", "yes"}
        return ok(container.session_service.list_sessions(active_only=active_only))

    @app.route("/api/sessions", methods=["POST"], endpoint="create_session")
    @login_required
    @api_view
    def create_session():
        data = json_body()
        session = container.session_service.create_session(
            name=data.get("name", ""),
            course=data.get("course", ""),
            instructor=data.get("instructor"),
            description=data.get("description"),
            max_students=data.get("maxStudents", DEFAULT_MAX_STUDENTS),
        )
        return ok(session, 201)

    @app.route("/api/sessions/<session_id>", methods=["GET"], endpoint="get_session")
    @login_required
    @api_view
    def get_session(session_id: str):
        return ok(container.session_service.get_session(session_id))

    @app.route("/api/sessions/<session_id>/close", methods=["POST"], endpoint="close_session")
    @login_required
    @api_view
    def close_session(session_id: str):
        return ok(container.session_service.close_session(session_id))

    @app.route("/api/sessions/<session_id>/status", methods=["PUT"], endpoint="update_session_status")
    @login_required
    @api_view
    def update_session_status(session_id: str):
        status = json_body().get("status", "")
        return ok(container.session_service.update_session_status(session_id, status))

    @app.route("/api/sessions/<session_id>/students", methods=["GET"], endpoint="list_session_students")
    @login_required
    @api_view
    def list_session_students(session_id: str):
        return ok(container.session_service.list_session_students(session_id))

    @app.route("/api/sessions/<session_id>/students", methods=["POST"], endpoint="add_session_student")
    @login_required
    @api_view
    def add_session_student(session_id: str):
        student_id = json_body().get("studentId", "")
        return ok(container.session_service.add_student_to_session(session_id, student_id), 201)

    @app.route(
        "/api/sessions/<session_id>/students/<student_id>",
        methods=["DELETE"],
        endpoint="remove_session_student",
    )
    @login_required
    @api_view
    def remove_session_student(session_id: str, student_id: str):
        removed = container.session_service.remove_student_from_session(session_id, student_id)
        return ok(removed=removed)
