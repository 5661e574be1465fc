from __future__ import annotations

import csv
import io
from typing import Optional

from flask import Flask, jsonify, request

from ..common.web import (
    arg_date,
    current_user_id,
    current_work_centers,
    handle_domain_errors,
    json_error,
    supervisor_required,
)
from ..container import Container
from ..core.enums import ReportType
from ..core.exceptions import AuthorizationError, ValidationError

_MONTHS = ["jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec"]


def _employee_columns(row: dict) -> dict:
    employee = row["employee"]
    return {
        "employee_id": employee["id"],
        "fiscal_name": employee["fiscal_name"],
        "document_number": employee["document_number"],
    }


def _csv_rows(report_type: ReportType, rows: list[dict]) -> tuple[list[str], list[dict]]:
    """Flatten JSON report rows into (fieldnames, csv rows)."""
    people = ["employee_id", "fiscal_name", "document_number"]

    if report_type == ReportType.DAILY:
        return people + ["date", "total_hours"], [
            dict(_employee_columns(r), date=r["date"], total_hours=f"{r['total_hours']:.2f}") for r in rows
        ]

    if report_type == ReportType.ANNUAL:
        out = []
        for r in rows:
            line = _employee_columns(r)
            line["year"] = r["year"]
            line.update({m: f"{h:.2f}" for m, h in zip(_MONTHS, r["monthly_hours"])})
            line["total_hours"] = f"{r['total_hours']:.2f}"
            out.append(line)
        return people + ["year"] + _MONTHS + ["total_hours"], out

    if report_type == ReportType.ALARMS:
        return people + ["start", "end", "total_hours", "hours_limit", "excess_hours"], [
            dict(
                _employee_columns(r),
                start=r["start"],
                end=r["end"],
                total_hours=f"{r['total_hours']:.2f}",
                hours_limit=f"{r['hours_limit']:.2f}",
                excess_hours=f"{r['excess_hours']:.2f}",
            )
            for r in rows
        ]

    # official: one line per day of the single employee report
    out = []
    for r in rows:
        for day in r["daily_reports"]:
            out.append(
                dict(
                    _employee_columns(r),
                    date=day["date"],
                    clock_in=day["clock_in"],
                    clock_out=day["clock_out"],
                    break_duration=day["break_duration"],
                    total_hours=f"{day['total_hours']:.2f}",
                )
            )
    return people + ["date", "clock_in", "clock_out", "break_duration", "total_hours"], out


def register(app: Flask, container: Container) -> None:
    def _selected_work_centers() -> list[str]:
        """All of the supervisor's centers, or the one picked with ?work_center= (must be theirs)."""
        mine = current_work_centers()
        picked = (request.args.get("work_center") or "").strip()
        if not picked:
            return mine
        if picked not in mine:
            raise AuthorizationError("Work center is not assigned to you")
        return [picked]

    def _optional_float(name: str) -> Optional[float]:
        value = request.args.get(name)
        if value is None or value == "":
            return None
        try:
            return float(value)
        except ValueError:
            raise ValidationError(f"Invalid {name}")

    def _optional_int(name: str) -> Optional[int]:
        value = request.args.get(name)
        if value is None or value == "":
            return None
        try:
            return int(value)
        except ValueError:
            raise ValidationError(f"Invalid {name}")

    def _write_report_csv(*, fieldnames: list[str], rows: list[dict], filename: str):
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=fieldnames)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/supervisor/dashboard", methods=["GET"], endpoint="supervisor_dashboard")
    @supervisor_required
    @handle_domain_errors
    def supervisor_dashboard():
        dashboard = container.report_service.dashboard(_selected_work_centers())
        return jsonify({"success": True, "dashboard": dashboard.to_dict()}), 200

    @app.route("/api/supervisor/employees", methods=["GET"], endpoint="supervisor_employees")
    @supervisor_required
    @handle_domain_errors
    def supervisor_employees():
        employees = container.employees_repo.list_employees_for_work_centers(_selected_work_centers())
        return jsonify({"success": True, "employees": [e.summary() for e in employees]}), 200

    @app.route("/api/supervisor/reports/<report_name>", methods=["GET"], endpoint="supervisor_report")
    @supervisor_required
    @handle_domain_errors
    def supervisor_report(report_name: str):
        """JSON report, or a CSV download when the name ends in ``.csv`` (e.g. ``alarms.csv``)."""
        as_csv = report_name.endswith(".csv")
        if as_csv:
            report_name = report_name[: -len(".csv")]
        try:
            report_type = ReportType(report_name)
        except ValueError:
            return json_error(f"Unknown report type: {report_name}", 404)

        company = None
        if report_type == ReportType.OFFICIAL:
            supervisor = container.employees_repo.get_supervisor(current_user_id())
            company = supervisor.company if supervisor else None

        start = arg_date("start")
        end = arg_date("end")
        rows = container.report_service.generate(
            report_type,
            work_centers=_selected_work_centers(),
            start=start,
            end=end,
            year=_optional_int("year"),
            employee_id=(request.args.get("employee_id") or None),
            hours_limit=_optional_float("hours_limit"),
            company=company,
        )

        if not as_csv:
            return jsonify({"success": True, "type": report_type.value, "rows": rows}), 200

        fieldnames, csv_rows = _csv_rows(report_type, rows)
        if report_type == ReportType.ANNUAL:
            suffix = str(rows[0]["year"]) if rows else "annual"
        else:
            suffix = f"{start:%Y%m%d}_{end:%Y%m%d}"
        return _write_report_csv(
            fieldnames=fieldnames,
            rows=csv_rows,
            filename=f"{report_type.value}_report_{suffix}.csv",
        )
