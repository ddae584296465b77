from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_TIMEZONE
from ..core.enums import ShiftStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from ..worktime.calculator.base import WorkTimeCalculator
from ..worktime.calculator.tiered_calculator import TieredBreakCalculator, is_overtime
from .model import AttendanceRecord, WorkingStatus
from .repository import AttendanceRepository

log = logging.getLogger(__name__)

_UNSET = object()


def overtime_note(overtime_minutes: Optional[int]) -> Optional[str]:
    if overtime_minutes and overtime_minutes > 0:
        return f"残業{int(overtime_minutes)}分"
    return None


class AttendanceService:
    """Use case: punch in/out and administrative corrections.

    Shift lifecycle: no open shift -> ``working`` (clock-in) -> ``completed``
    (clock-out). An employee never has two ``working`` records; the service
    checks first and the database unique key backs it up under concurrency.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        *,
        calculator: Optional[WorkTimeCalculator] = None,
        tz_name: str = DEFAULT_TIMEZONE,
    ):
        self._attendance = attendance
        self._employees = employees
        self._calculator = calculator or TieredBreakCalculator()
        self._tz_name = tz_name

    def _now(self) -> datetime:
        return now_local(self._tz_name)

    def _require_record(self, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(attendance_id)
        if not record:
            raise NotFoundError("勤務記録が見つかりません")
        return record

    def clock_in(self, employee_id: int, *, now: datetime | None = None) -> AttendanceRecord:
        now = now or self._now()
        work_date = now.date()

        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("従業員が見つかりません")
        if not employee.is_active:
            raise ValidationError("無効な従業員です")

        if self._attendance.get_open_for_employee(employee_id):
            raise ValidationError("既に出勤中です")

        shift_number = self._attendance.get_last_shift_number(employee_id, work_date) + 1
        attendance_id = self._attendance.create_clock_in(
            employee_id=employee_id,
            work_date=work_date,
            shift_number=shift_number,
            clock_in=now,
        )
        log.info("Clock-in employee=%s date=%s shift=%s", employee_id, work_date, shift_number)
        return self._require_record(attendance_id)

    def clock_out(
        self,
        employee_id: int,
        *,
        overtime_minutes: Optional[int] = None,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        now = now or self._now()

        record = self._attendance.get_open_for_employee(employee_id)
        if not record:
            raise ValidationError("出勤記録がありません")

        result = self._calculator.calculate(record.clock_in, now)
        closed = self._attendance.close_shift(
            attendance_id=record.attendance_id,
            clock_out=now,
            result=result,
            note=overtime_note(overtime_minutes) or record.note,
        )
        if not closed:
            raise ValidationError("出勤記録がありません")

        log.info(
            "Clock-out employee=%s work=%s break=%s overnight=%s",
            employee_id,
            result.work_minutes,
            result.break_minutes,
            result.is_overnight,
        )
        return self._require_record(record.attendance_id)

    def get_status(self, employee_id: int, *, today: date | None = None) -> WorkingStatus:
        today = today or self._now().date()
        record = self._attendance.get_open_for_employee(employee_id)
        return WorkingStatus(
            is_working=record is not None,
            working_record=record,
            is_old_working_record=bool(record and record.work_date < today),
        )

    def list_today(self, employee_id: int, *, today: date | None = None) -> Sequence[AttendanceRecord]:
        today = today or self._now().date()
        return self._attendance.list_for_employee_and_date(employee_id, today)

    def search(
        self,
        *,
        employee_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        if start_date and end_date and start_date > end_date:
            raise ValidationError("開始日は終了日以前で指定してください")
        return self._attendance.search(employee_id=employee_id, start_date=start_date, end_date=end_date)

    def correct_record(
        self,
        attendance_id: int,
        *,
        work_date: Optional[date] = None,
        clock_in: Optional[datetime] = None,
        clock_out=_UNSET,
        note=_UNSET,
    ) -> AttendanceRecord:
        """Admin correction.

        Changing either instant re-runs the calculation against the other
        stored instant. ``clock_out=None`` clears the clock-out and reopens
        the shift.
        """
        current = self._require_record(attendance_id)

        fields: dict[str, object] = {}
        if work_date is not None:
            fields["work_date"] = work_date
        if clock_in is not None:
            fields["clock_in"] = clock_in
        if clock_out is not _UNSET:
            fields["clock_out"] = clock_out
        if note is not _UNSET:
            fields["note"] = note

        if clock_in is not None or clock_out is not _UNSET:
            start = clock_in if clock_in is not None else current.clock_in
            end = current.clock_out if clock_out is _UNSET else clock_out
            if end is None:
                other = self._attendance.get_open_for_employee(current.employee_id)
                if other and other.attendance_id != current.attendance_id:
                    raise ValidationError("既に出勤中です")
                fields.update(work_minutes=0, break_minutes=0, is_overnight=False, status=ShiftStatus.WORKING)
            else:
                result = self._calculator.calculate(start, end)
                fields.update(
                    work_minutes=result.work_minutes,
                    break_minutes=result.break_minutes,
                    is_overnight=result.is_overnight,
                    status=ShiftStatus.COMPLETED,
                )
                if is_overtime(result.work_minutes):
                    log.warning("Record %s now credits %s minutes (over 24h)", attendance_id, result.work_minutes)

        if not self._attendance.update_record(attendance_id, fields=fields):
            raise NotFoundError("勤務記録が見つかりません")
        log.info("Corrected record %s fields=%s", attendance_id, sorted(fields))
        return self._require_record(attendance_id)

    def delete_record(self, attendance_id: int) -> None:
        if not self._attendance.delete(attendance_id):
            raise NotFoundError("勤務記録が見つかりません")
        log.info("Deleted record %s", attendance_id)
