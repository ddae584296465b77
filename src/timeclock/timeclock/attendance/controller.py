from __future__ import annotations

from typing import Optional

from flask import Flask, jsonify, request

from ..common.auth import admin_required
from ..common.datetime_utils import isoformat_or_none, parse_iso_date, parse_iso_datetime
from ..common.http import json_body
from ..common.validators import optional_text, require_int
from ..container import Container
from ..worktime.formatting import format_minutes, format_minutes_localized
from .model import AttendanceRecord


def record_to_json(r: AttendanceRecord) -> dict:
    data = {
        "id": r.attendance_id,
        "employee_id": r.employee_id,
        "work_date": r.work_date.strftime("%Y-%m-%d"),
        "shift_number": r.shift_number,
        "clock_in": isoformat_or_none(r.clock_in),
        "clock_out": isoformat_or_none(r.clock_out),
        "break_minutes": r.break_minutes,
        "work_minutes": r.work_minutes,
        "is_overnight": r.is_overnight,
        "status": r.status.value,
        "note": r.note,
        "work_hm": format_minutes(r.work_minutes if r.clock_out else None),
        "work_display": format_minutes_localized(r.work_minutes if r.clock_out else None),
    }
    if r.employee_name is not None:
        data["employees"] = {"id": r.employee_id, "name": r.employee_name}
    return data


def _optional_int(value, message: str) -> Optional[int]:
    if value is None or value == "":
        return None
    return require_int(value, message)


def register(app: Flask, container: Container) -> None:
    def _employee_id_arg() -> int:
        return require_int(request.args.get("employee_id"), "従業員IDが必要です")

    @app.route("/api/attendance/clock-in", methods=["POST"], endpoint="clock_in")
    def clock_in():
        employee_id = require_int(json_body().get("employee_id"), "従業員IDが必要です")
        record = container.attendance_service.clock_in(employee_id)
        return jsonify(record_to_json(record))

    @app.route("/api/attendance/clock-out", methods=["POST"], endpoint="clock_out")
    def clock_out():
        data = json_body()
        employee_id = require_int(data.get("employee_id"), "従業員IDが必要です")
        overtime = _optional_int(data.get("overtime_minutes"), "残業時間は整数で指定してください")
        record = container.attendance_service.clock_out(employee_id, overtime_minutes=overtime)
        return jsonify(record_to_json(record))

    @app.route("/api/attendance/status", methods=["GET"], endpoint="attendance_status")
    def attendance_status():
        status = container.attendance_service.get_status(_employee_id_arg())
        return jsonify(
            {
                "isWorking": status.is_working,
                "workingRecord": record_to_json(status.working_record) if status.working_record else None,
                "isOldWorkingRecord": status.is_old_working_record,
            }
        )

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    def attendance_today():
        records = container.attendance_service.list_today(_employee_id_arg())
        return jsonify([record_to_json(r) for r in records])

    @app.route("/api/attendance", methods=["GET"], endpoint="list_attendance")
    @admin_required
    def list_attendance():
        start_s = request.args.get("start_date")
        end_s = request.args.get("end_date")
        records = container.attendance_service.search(
            employee_id=_optional_int(request.args.get("employee_id"), "従業員IDが正しくありません"),
            start_date=parse_iso_date(start_s) if start_s else None,
            end_date=parse_iso_date(end_s) if end_s else None,
        )
        return jsonify([record_to_json(r) for r in records])

    @app.route("/api/attendance", methods=["PUT"], endpoint="update_attendance")
    @admin_required
    def update_attendance():
        data = json_body()
        attendance_id = require_int(data.get("id"), "IDが必要です")
        tz_name = container.timezone

        kwargs = {}
        if data.get("work_date"):
            kwargs["work_date"] = parse_iso_date(data["work_date"])
        if data.get("clock_in"):
            kwargs["clock_in"] = parse_iso_datetime(data["clock_in"], tz_name=tz_name)
        if "clock_out" in data:
            # null clears a wrong clock-out and reopens the shift
            clock_out = data["clock_out"]
            kwargs["clock_out"] = parse_iso_datetime(clock_out, tz_name=tz_name) if clock_out else None
        if "note" in data:
            kwargs["note"] = optional_text(data["note"], "備考は文字列で指定してください")

        record = container.attendance_service.correct_record(attendance_id, **kwargs)
        return jsonify(record_to_json(record))

    @app.route("/api/attendance", methods=["DELETE"], endpoint="delete_attendance")
    @admin_required
    def delete_attendance():
        attendance_id = require_int(request.args.get("id"), "IDが必要です")
        container.attendance_service.delete_record(attendance_id)
        return jsonify({"success": True})
