from __future__ import annotations

from typing import Optional

from flask import Flask, current_app, jsonify, request, session

from ..common.datetime_utils import get_zone, local_date, now_utc, period_bounds
from ..common.web import arg_date, current_user_id, employee_required, handle_domain_errors
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    def _employee_zone():
        return get_zone(session.get("timezone") or current_app.config["TIMEZONE"])

    def _coordinate(data: dict, key: str) -> Optional[float]:
        value = data.get(key)
        if value is None or value == "":
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid {key}")

    def _clock_response(event, message: str):
        status = container.clock_service.current_state(current_user_id())
        return jsonify({"success": True, "message": message, "entry": event.to_dict(), "status": status.to_dict()}), 200

    @app.route("/api/clock/state", methods=["GET"], endpoint="clock_state")
    @employee_required
    @handle_domain_errors
    def clock_state():
        status = container.clock_service.current_state(current_user_id())
        return jsonify({"success": True, "status": status.to_dict()}), 200

    @app.route("/api/clock/in", methods=["POST"], endpoint="clock_in")
    @employee_required
    @handle_domain_errors
    def clock_in():
        data = request.get_json(silent=True) or {}
        event = container.clock_service.clock_in(
            current_user_id(),
            work_center=(data.get("work_center") or None),
            latitude=_coordinate(data, "latitude"),
            longitude=_coordinate(data, "longitude"),
        )
        return _clock_response(event, "Clocked in")

    @app.route("/api/clock/break-start", methods=["POST"], endpoint="clock_break_start")
    @employee_required
    @handle_domain_errors
    def clock_break_start():
        data = request.get_json(silent=True) or {}
        event = container.clock_service.break_start(
            current_user_id(),
            latitude=_coordinate(data, "latitude"),
            longitude=_coordinate(data, "longitude"),
        )
        return _clock_response(event, "Break started")

    @app.route("/api/clock/break-end", methods=["POST"], endpoint="clock_break_end")
    @employee_required
    @handle_domain_errors
    def clock_break_end():
        data = request.get_json(silent=True) or {}
        event = container.clock_service.break_end(
            current_user_id(),
            latitude=_coordinate(data, "latitude"),
            longitude=_coordinate(data, "longitude"),
        )
        return _clock_response(event, "Break ended")

    @app.route("/api/clock/out", methods=["POST"], endpoint="clock_out")
    @employee_required
    @handle_domain_errors
    def clock_out():
        data = request.get_json(silent=True) or {}
        event = container.clock_service.clock_out(
            current_user_id(),
            latitude=_coordinate(data, "latitude"),
            longitude=_coordinate(data, "longitude"),
        )
        return _clock_response(event, "Clocked out")

    @app.route("/api/history", methods=["GET"], endpoint="history")
    @employee_required
    @handle_domain_errors
    def history():
        """Personal history: ?period=today|week|month or explicit ?start=&end=."""
        tz = _employee_zone()
        today = local_date(now_utc(), tz)

        period = request.args.get("period")
        if period:
            start, end = period_bounds(period, today)
        else:
            start = arg_date("start", today.replace(day=1))
            end = arg_date("end", today)

        view = container.clock_service.history(current_user_id(), start=start, end=end)
        return jsonify({"success": True, "history": view.to_dict(tz)}), 200
