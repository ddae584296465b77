from __future__ import annotations

from datetime import date, datetime
from typing import Mapping, Optional, Protocol, Sequence

from ..core.enums import ShiftStatus
from ..worktime.model import WorkTimeResult
from .model import AttendanceRecord

# Columns an administrator may overwrite through a correction.
CORRECTABLE_COLUMNS = frozenset(
    {"work_date", "clock_in", "clock_out", "note", "break_minutes", "work_minutes", "is_overnight", "status"}
)


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_open_for_employee(self, employee_id: int) -> Optional[AttendanceRecord]:
        """The employee's ``working`` record regardless of work date."""

        raise NotImplementedError

    def get_last_shift_number(self, employee_id: int, work_date: date) -> int:
        """Highest shift number used on ``work_date``; 0 when none."""

        raise NotImplementedError

    def list_for_employee_and_date(self, employee_id: int, work_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def search(
        self,
        *,
        employee_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        status: Optional[ShiftStatus] = None,
        newest_first: bool = True,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create_clock_in(self, *, employee_id: int, work_date: date, shift_number: int, clock_in: datetime) -> int:
        raise NotImplementedError

    def close_shift(
        self,
        *,
        attendance_id: int,
        clock_out: datetime,
        result: WorkTimeResult,
        note: Optional[str] = None,
    ) -> bool:
        """Close an open shift; False when it is not open anymore."""

        raise NotImplementedError

    def update_record(self, attendance_id: int, *, fields: Mapping[str, object]) -> bool:
        """Admin-only override; ``fields`` keys must be in CORRECTABLE_COLUMNS."""

        raise NotImplementedError

    def delete(self, attendance_id: int) -> bool:
        raise NotImplementedError
