from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, request, session

from ..common.web import current_user_id, employee_required, handle_domain_errors, json_error, login_required
from ..container import Container
from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    @app.route("/api/login", methods=["POST"], endpoint="login")
    @handle_domain_errors
    def login():
        data = request.get_json(silent=True) or {}
        try:
            role = Role(data.get("role") or Role.EMPLOYEE.value)
        except ValueError:
            return json_error("Invalid role", 400)

        s_user = container.auth_service.authenticate(data.get("email", ""), str(data.get("pin", "")), role)

        session.clear()
        session.permanent = bool(data.get("remember_me"))
        app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)

        session["user_id"] = s_user.user_id
        session["name"] = s_user.full_name
        session["email"] = s_user.email
        session["role"] = s_user.role.value
        session["work_centers"] = list(s_user.work_centers)
        session["timezone"] = s_user.timezone

        return jsonify({"success": True, "user": _session_payload()}), 200

    @app.route("/api/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True}), 200

    @app.route("/api/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        return jsonify({"success": True, "user": _session_payload()}), 200

    @app.route("/api/me/pin", methods=["POST"], endpoint="change_pin")
    @employee_required
    @handle_domain_errors
    def change_pin():
        data = request.get_json(silent=True) or {}
        confirm_pin = data.get("confirm_pin")
        container.auth_service.change_pin(
            current_user_id(),
            str(data.get("current_pin", "")),
            str(data.get("new_pin", "")),
            None if confirm_pin is None else str(confirm_pin),
        )
        return jsonify({"success": True, "message": "PIN updated"}), 200


def _session_payload() -> dict:
    return {
        "id": session.get("user_id"),
        "name": session.get("name"),
        "email": session.get("email"),
        "role": session.get("role"),
        "work_centers": session.get("work_centers") or [],
    }
