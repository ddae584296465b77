from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import month_bounds
from ..core.constants import MINUTES_PER_HOUR
from ..core.enums import ShiftStatus
from ..worktime.formatting import format_minutes_localized

# (row key, CSV header)
CSV_COLUMNS = [
    ("work_date", "日付"),
    ("employee_name", "従業員名"),
    ("shift_number", "シフト番号"),
    ("clock_in", "出勤時刻"),
    ("clock_out", "退勤時刻"),
    ("break_minutes", "休憩時間(分)"),
    ("work_minutes", "労働時間(分)"),
    ("work_hours", "労働時間(時間)"),
    ("note", "備考"),
]


@dataclass(frozen=True)
class MonthlyReport:
    year: int
    month: int
    rows: list[dict]
    employees: list[dict]
    records: Sequence[AttendanceRecord]

    @property
    def csv_filename(self) -> str:
        return f"attendance_{self.year:04d}{self.month:02d}.csv"


def _hhmm(value) -> str:
    return value.strftime("%H:%M") if value else ""


class MonthlyReportService:
    """Monthly attendance report over completed shifts.

    Totals are kept per employee; a day with several shifts counts as one
    work day.
    """

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def build_monthly_report(self, *, year: int, month: int, employee_id: Optional[int] = None) -> MonthlyReport:
        start, end = month_bounds(year, month)
        records = self._attendance.search(
            employee_id=employee_id,
            start_date=start,
            end_date=end,
            status=ShiftStatus.COMPLETED,
            newest_first=False,
        )

        rows: list[dict] = []
        summary_map: dict[int, dict] = {}
        work_days: dict[int, set] = {}

        for r in records:
            rows.append(
                {
                    "work_date": r.work_date.strftime("%Y-%m-%d"),
                    "employee_name": r.employee_name or "",
                    "shift_number": r.shift_number,
                    "clock_in": _hhmm(r.clock_in),
                    "clock_out": _hhmm(r.clock_out),
                    "break_minutes": r.break_minutes,
                    "work_minutes": r.work_minutes,
                    "work_hours": f"{r.work_minutes / MINUTES_PER_HOUR:.2f}" if r.work_minutes else "0",
                    "note": (r.note or "").replace("\n", " "),
                }
            )

            s = summary_map.get(r.employee_id)
            if not s:
                s = {
                    "id": r.employee_id,
                    "name": r.employee_name or "",
                    "totalWorkMinutes": 0,
                    "records": 0,
                }
                summary_map[r.employee_id] = s
            s["totalWorkMinutes"] += r.work_minutes
            s["records"] += 1
            work_days.setdefault(r.employee_id, set()).add(r.work_date)

        employees = []
        for s in summary_map.values():
            total = int(s["totalWorkMinutes"])
            employees.append(
                {
                    **s,
                    "totalDays": len(work_days.get(s["id"], ())),
                    "totalWorkHours": total // MINUTES_PER_HOUR,
                    "totalWorkMinutesRemainder": total % MINUTES_PER_HOUR,
                    "totalWorkDisplay": format_minutes_localized(total),
                }
            )
        employees.sort(key=lambda x: x["name"])

        return MonthlyReport(year=year, month=month, rows=rows, employees=employees, records=records)
