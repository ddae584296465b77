from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import ShiftStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one shift (clock-in to clock-out) of one employee.

    ``shift_number`` counts shifts within the employee's work date, starting at 1.
    ``employee_name`` is only filled by queries that join the employee.
    """

    attendance_id: int
    employee_id: int
    work_date: date
    shift_number: int
    clock_in: datetime
    clock_out: Optional[datetime]
    break_minutes: int
    work_minutes: int
    is_overnight: bool
    status: ShiftStatus
    note: Optional[str] = None
    employee_name: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.status == ShiftStatus.WORKING


@dataclass(frozen=True)
class WorkingStatus:
    """Whether an employee is currently clocked in, and since which work date."""

    is_working: bool
    working_record: Optional[AttendanceRecord]
    is_old_working_record: bool
