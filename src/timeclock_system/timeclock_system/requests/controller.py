from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import (
    current_role,
    current_user_id,
    current_work_centers,
    employee_required,
    handle_domain_errors,
    supervisor_required,
)
from ..container import Container
from ..core.enums import RequestStatus
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    def _body_date(data: dict, key: str, *, required: bool = True):
        value = (data.get(key) or "").strip()
        if not value:
            if required:
                raise ValidationError("Please fill in all required fields")
            return None
        try:
            return parse_iso_date(value)
        except ValueError:
            raise ValidationError(f"Invalid date for {key} (YYYY-MM-DD)")

    @app.route("/api/requests", methods=["GET"], endpoint="my_requests")
    @employee_required
    @handle_domain_errors
    def my_requests():
        data = container.request_service.list_my_requests(employee_id=current_user_id())
        return jsonify({"success": True, **data}), 200

    @app.route("/api/requests/time", methods=["POST"], endpoint="create_time_request")
    @employee_required
    @handle_domain_errors
    def create_time_request():
        data = request.get_json(silent=True) or {}
        request_id = container.request_service.create_time_request(
            current_role=current_role(),
            employee_id=current_user_id(),
            entry_type=(data.get("entry_type") or "").strip(),
            work_date=_body_date(data, "date"),
            entry_time=(data.get("time") or "").strip(),
            work_center=(data.get("work_center") or "").strip(),
            comment=data.get("comment") or "",
        )
        return jsonify({"success": True, "request_id": request_id, "message": "Request submitted"}), 201

    @app.route("/api/requests/planner", methods=["POST"], endpoint="create_planner_request")
    @employee_required
    @handle_domain_errors
    def create_planner_request():
        data = request.get_json(silent=True) or {}
        start_date = _body_date(data, "start_date")
        end_date = _body_date(data, "end_date", required=False) or start_date
        request_id = container.request_service.create_planner_request(
            current_role=current_role(),
            employee_id=current_user_id(),
            planner_type=(data.get("planner_type") or "").strip(),
            start_date=start_date,
            end_date=end_date,
            start_time=(data.get("start_time") or "").strip(),
            end_time=(data.get("end_time") or "").strip(),
            comment=data.get("comment") or "",
        )
        return jsonify({"success": True, "request_id": request_id, "message": "Request submitted"}), 201

    @app.route("/api/supervisor/requests", methods=["GET"], endpoint="supervisor_requests")
    @supervisor_required
    @handle_domain_errors
    def supervisor_requests():
        status_s = (request.args.get("status") or "").strip()
        try:
            status = RequestStatus(status_s) if status_s else None
        except ValueError:
            raise ValidationError("Invalid status")

        rows = container.request_service.list_for_supervisor(work_centers=current_work_centers(), status=status)
        return jsonify({"success": True, "requests": rows}), 200

    @app.route(
        "/api/supervisor/requests/time/<int:request_id>/approve",
        methods=["POST"],
        endpoint="approve_time_request",
    )
    @supervisor_required
    @handle_domain_errors
    def approve_time_request(request_id: int):
        entry_id = container.request_service.approve_time_request(
            current_role=current_role(),
            supervisor_id=current_user_id(),
            request_id=request_id,
        )
        return jsonify({"success": True, "entry_id": entry_id, "message": "Request approved"}), 200

    @app.route(
        "/api/supervisor/requests/time/<int:request_id>/reject",
        methods=["POST"],
        endpoint="reject_time_request",
    )
    @supervisor_required
    @handle_domain_errors
    def reject_time_request(request_id: int):
        container.request_service.reject_time_request(
            current_role=current_role(),
            supervisor_id=current_user_id(),
            request_id=request_id,
        )
        return jsonify({"success": True, "message": "Request rejected"}), 200

    @app.route(
        "/api/supervisor/requests/planner/<int:request_id>/<decision>",
        methods=["POST"],
        endpoint="decide_planner_request",
    )
    @supervisor_required
    @handle_domain_errors
    def decide_planner_request(request_id: int, decision: str):
        if decision not in ("approve", "reject"):
            raise ValidationError("Invalid decision")
        container.request_service.decide_planner_request(
            current_role=current_role(),
            supervisor_id=current_user_id(),
            request_id=request_id,
            approve=decision == "approve",
        )
        return jsonify({"success": True, "message": f"Request {decision}ed"}), 200
