from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import isoformat_utc, parse_iso_date
from ..common.validators import require_int
from ..container import Container
from ..core.exceptions import ValidationError
from ..web import admin_required, current_company_id, current_staff_id, json_body, login_required, ok, query_int


def _record_dict(record) -> dict | None:
    if record is None:
        return None
    return {
        "id": record.attendance_id,
        "staffId": record.staff_id,
        "date": record.work_date.isoformat(),
        "punchIn": isoformat_utc(record.punch_in),
        "punchOut": isoformat_utc(record.punch_out),
        "status": record.status.value,
        "leaveType": record.leave_type,
        "lateMinutes": record.late_minutes,
        "earlyMinutes": record.early_minutes,
        "fineAmount": record.fine_amount,
        "note": record.note,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/punch-in", methods=["POST"], endpoint="punch_in")
    @login_required
    def punch_in():
        record = container.attendance_service.punch_in(current_staff_id())
        return ok(_record_dict(record), 201)

    @app.route("/api/attendance/punch-out", methods=["POST"], endpoint="punch_out")
    @login_required
    def punch_out():
        record = container.attendance_service.punch_out(current_staff_id())
        return ok(_record_dict(record))

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    def today():
        record = container.attendance_service.get_today_record(current_staff_id())
        return ok(_record_dict(record))

    @app.route("/api/attendance/leave", methods=["POST"], endpoint="attendance_leave")
    @admin_required
    def mark_leave():
        body = json_body()
        staff = container.staff_service.get(require_int(body.get("staffId"), "staffId"))
        if staff.company_id != current_company_id():
            raise ValidationError("Staff belongs to another company")
        record = container.attendance_service.mark_leave(
            staff.staff_id,
            parse_iso_date(body.get("date", "")),
            body.get("leaveType", ""),
        )
        return ok(_record_dict(record), 201)

    @app.route("/api/attendance/report", methods=["GET"], endpoint="attendance_report")
    @admin_required
    def report():
        start = parse_iso_date(request.args.get("from", ""))
        end = parse_iso_date(request.args.get("to", ""))
        data = container.payroll_report_service.build_attendance_report(
            company_id=current_company_id(),
            start=start,
            end=end,
            staff_id=query_int("staffId"),
        )
        return ok({"rows": data.rows, "summary": data.summary})
