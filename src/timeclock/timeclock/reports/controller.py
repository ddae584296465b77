from __future__ import annotations

import csv
import io

from flask import Flask, jsonify, request

from ..attendance.controller import record_to_json
from ..common.auth import admin_required
from ..common.validators import require_int
from ..container import Container
from ..core.enums import ReportFormat
from ..core.exceptions import ValidationError
from .service import CSV_COLUMNS, MonthlyReport


def register(app: Flask, container: Container) -> None:
    def _write_report_csv(report: MonthlyReport):
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=[key for key, _ in CSV_COLUMNS])
        writer.writerow(dict(CSV_COLUMNS))
        for row in report.rows:
            writer.writerow(row)

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{report.csv_filename}"'},
        )

    @app.route("/api/reports", methods=["GET"], endpoint="monthly_report")
    @admin_required
    def monthly_report():
        if not request.args.get("year") or not request.args.get("month"):
            raise ValidationError("年月が必要です")
        year = require_int(request.args.get("year"), "年が正しくありません")
        month = require_int(request.args.get("month"), "月が正しくありません")

        try:
            fmt = ReportFormat(request.args.get("format") or ReportFormat.JSON.value)
        except ValueError:
            raise ValidationError("formatはjsonまたはcsvで指定してください")

        employee_s = request.args.get("employee_id")
        employee_id = require_int(employee_s, "従業員IDが正しくありません") if employee_s else None

        report = container.report_service.build_monthly_report(year=year, month=month, employee_id=employee_id)
        if fmt == ReportFormat.CSV:
            return _write_report_csv(report)

        return jsonify(
            {
                "year": report.year,
                "month": report.month,
                "employees": report.employees,
                "records": [record_to_json(r) for r in report.records],
            }
        )
