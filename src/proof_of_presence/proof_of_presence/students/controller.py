from __future__ import annotations

from flask import Flask, request

from ..common.http import api_view, json_body, login_required, ok
from ..container import Container
from .model import StudentDetails


def _details_from(data: dict) -> StudentDetails:
    return StudentDetails(
        first_name=data.get("firstName", ""),
        last_name=data.get("lastName", ""),
        roll_number=data.get("rollNumber", ""),
        email=data.get("email"),
        class_name=data.get("class"),
        section=data.get("section"),
        phone=data.get("phone"),
        address=data.get("address"),
        guardian_name=data.get("guardianName"),
        guardian_phone=data.get("guardianPhone"),
        photo_url=data.get("photoURL"),
    )


def register(app: Flask, container: Container) -> None:
    @app.route("/api/students", methods=["GET"], endpoint="list_students")
    @login_required
    @api_view
    def list_students():
        students = container.student_service.list_students(
            search=request.args.get("search"),
            class_name=request.args.get("class") or None,
        )
        return ok(students)

    @app.route("/api/students/classes", methods=["GET"], endpoint="list_classes")
    @login_required
    @api_view
    def list_classes():
        return ok(container.student_service.list_classes())

    @app.route("/api/students", methods=["POST"], endpoint="create_student")
    @login_required
    @api_view
    def create_student():
        student = container.student_service.create_student(_details_from(json_body()))
        return ok(student, 201)

    @app.route("/api/students/<student_id>", methods=["GET"], endpoint="get_student")
    @login_required
    @api_view
    def get_student(student_id: str):
        return ok(container.student_service.get_student(student_id))

    @app.route("/api/students/<student_id>", methods=["PUT"], endpoint="update_student")
    @login_required
    @api_view
    def update_student(student_id: str):
        return ok(container.student_service.update_student(student_id, _details_from(json_body())))

    @app.route("/api/students/<student_id>", methods=["DELETE"], endpoint="delete_student")
    @login_required
    @api_view
    def delete_student(student_id: str):
        container.student_service.delete_student(student_id)
        return ok()
