from __future__ import annotations

from flask import Flask, session

from ..common.http import admin_required, api_view, json_body, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _remember(profile) -> None:
        session["user_id"] = profile.user_id
        session["name"] = profile.display_name
        session["role"] = profile.role

    @app.route("/api/auth/signup", methods=["POST"], endpoint="signup")
    @api_view
    def signup():
        data = json_body()
        profile = container.auth_service.signup(
            email=data.get("email", ""),
            password=data.get("password", ""),
            role=data.get("role", "teacher"),
            display_name=data.get("displayName", ""),
        )
        _remember(profile)
        return ok(profile, 201)

    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    @api_view
    def login():
        data = json_body()
        profile = container.auth_service.login(data.get("email", ""), data.get("password", ""))
        session.clear()
        _remember(profile)
        return ok(profile)

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return ok()

    @app.route("/api/auth/me", endpoint="me")
    @login_required
    @api_view
    def me():
        return ok(container.auth_service.get_profile(session["user_id"]))

    @app.route("/api/users/<user_id>/role", methods=["PUT"], endpoint="update_user_role")
    @admin_required
    @api_view
    def update_user_role(user_id: str):
        profile = container.auth_service.update_role(user_id, json_body().get("role", ""))
        if profile.user_id == session.get("user_id"):
            session["role"] = profile.role
        return ok(profile)
