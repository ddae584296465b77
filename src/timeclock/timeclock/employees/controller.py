from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.auth import admin_required
from ..common.datetime_utils import isoformat_or_none
from ..common.http import json_body
from ..common.validators import parse_bool_flag, require_bool, require_int
from ..container import Container
from .model import Employee


def employee_to_json(e: Employee) -> dict:
    return {
        "id": e.employee_id,
        "name": e.name,
        "is_active": e.is_active,
        "created_at": isoformat_or_none(e.created_at),
        "updated_at": isoformat_or_none(e.updated_at),
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/employees", methods=["GET"], endpoint="list_employees")
    def list_employees():
        include_inactive = parse_bool_flag(request.args.get("include_inactive"))
        employees = container.employee_service.list_employees(include_inactive=include_inactive)
        return jsonify([employee_to_json(e) for e in employees])

    @app.route("/api/employees", methods=["POST"], endpoint="create_employee")
    @admin_required
    def create_employee():
        employee = container.employee_service.create_employee(json_body().get("name"))
        return jsonify(employee_to_json(employee))

    @app.route("/api/employees", methods=["PUT"], endpoint="update_employee")
    @admin_required
    def update_employee():
        data = json_body()
        employee_id = require_int(data.get("id"), "IDが必要です")
        is_active = data.get("is_active")
        if is_active is not None:
            is_active = require_bool(is_active, "is_activeはtrueまたはfalseで指定してください")
        employee = container.employee_service.update_employee(
            employee_id,
            name=data.get("name"),
            is_active=is_active,
        )
        return jsonify(employee_to_json(employee))

    @app.route("/api/employees", methods=["DELETE"], endpoint="delete_employee")
    @admin_required
    def delete_employee():
        employee_id = require_int(request.args.get("id"), "IDが必要です")
        if parse_bool_flag(request.args.get("permanent")):
            container.employee_service.delete_employee_permanently(employee_id)
            return jsonify({"success": True, "message": "完全に削除しました"})

        employee = container.employee_service.deactivate_employee(employee_id)
        return jsonify(employee_to_json(employee))
