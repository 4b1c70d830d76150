from __future__ import annotations

from flask import Flask, request

from ..common.http import api_view, fail, json_body, login_required, ok
from ..container import Container
from ..vision.service import normalize_image


def register(app: Flask, container: Container) -> None:
    @app.route("/api/sessions/<session_id>/attendance", methods=["POST"], endpoint="mark_attendance")
    @login_required
    @api_view
    def mark_attendance(session_id: str):
        # JSON body, or multipart form with an optional "photo" file.
        data = request.form if request.files or request.form else json_body()
        photo = request.files.get("photo")
        result = container.attendance_service.mark_attendance(
            session_id,
            data.get("studentId", ""),
            data.get("status", ""),
            photo=photo.read() if photo else None,
            ledger=container.ledger,
        )
        return ok(
            {
                "recordId": result.record_id,
                "ledgerStatus": result.ledger.status,
                "ledgerResult": result.ledger_result,
            },
            201,
            message="Attendance marked successfully",
        )

    @app.route("/api/sessions/<session_id>/attendance", methods=["GET"], endpoint="session_attendance")
    @login_required
    @api_view
    def session_attendance(session_id: str):
        attendance = container.attendance_service.get_session_attendance(session_id, ledger=container.ledger)
        return ok(
            {
                "records": attendance.records,
                "ledgerRecords": attendance.ledger_records,
                "total": attendance.total,
            }
        )

    @app.route("/api/sessions/<session_id>/stats", methods=["GET"], endpoint="session_stats")
    @login_required
    @api_view
    def session_stats(session_id: str):
        return ok(container.stats_service.get_session_stats(session_id, ledger=container.ledger))

    @app.route("/api/dashboard", methods=["GET"], endpoint="dashboard")
    @login_required
    @api_view
    def dashboard():
        period = request.args.get("period", "today")
        return ok(container.stats_service.dashboard_summary(period=period))

    @app.route("/api/vision/analyze", methods=["POST"], endpoint="analyze_face")
    @login_required
    @api_view
    def analyze_face():
        if "image" not in request.files:
            return fail("Missing image file", 400)
        image = normalize_image(request.files["image"].read())
        return ok(container.vision_service.analyze_face(image))

    @app.route("/api/ledger/stats", methods=["GET"], endpoint="ledger_stats")
    @login_required
    @api_view
    def ledger_stats():
        return ok(container.ledger_service.get_stats(container.ledger))

    @app.route("/api/ledger/verify", methods=["GET"], endpoint="ledger_verify")
    @login_required
    @api_view
    def ledger_verify():
        verification = container.ledger_service.verify_record(
            container.ledger,
            student_id=request.args.get("studentId", ""),
            session_id=request.args.get("sessionId", ""),
            timestamp=request.args.get("timestamp", ""),
        )
        return ok(verification)
