from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Mapping, Optional, Sequence

from mysql.connector import errors as mysql_errors

from ..core.enums import ShiftStatus
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..worktime.model import WorkTimeResult
from .model import AttendanceRecord
from .repository import CORRECTABLE_COLUMNS, AttendanceRepository

log = logging.getLogger(__name__)

_SELECT = """
    SELECT ar.attendance_id, ar.employee_id, ar.work_date, ar.shift_number,
           ar.clock_in, ar.clock_out, ar.break_minutes, ar.work_minutes,
           ar.is_overnight, ar.status, ar.note, e.name AS employee_name
    FROM attendance_records ar
    JOIN employees e ON e.employee_id = ar.employee_id
"""


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        shift_number=int(r["shift_number"]),
        clock_in=r["clock_in"],
        clock_out=r.get("clock_out"),
        break_minutes=int(r.get("break_minutes") or 0),
        work_minutes=int(r.get("work_minutes") or 0),
        is_overnight=bool(r.get("is_overnight")),
        status=ShiftStatus(r["status"]),
        note=r.get("note"),
        employee_name=r.get("employee_name"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE ar.attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_open_for_employee(self, employee_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {_SELECT}
                WHERE ar.employee_id=%s AND ar.status=%s
                ORDER BY ar.clock_in DESC
                LIMIT 1
                """,
                (int(employee_id), ShiftStatus.WORKING.value),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_last_shift_number(self, employee_id: int, work_date: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COALESCE(MAX(shift_number), 0) AS last_shift
                FROM attendance_records
                WHERE employee_id=%s AND work_date=%s
                """,
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return int(r["last_shift"]) if r else 0

    def list_for_employee_and_date(self, employee_id: int, work_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {_SELECT}
                WHERE ar.employee_id=%s AND ar.work_date=%s
                ORDER BY ar.shift_number
                """,
                (int(employee_id), work_date),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def search(
        self,
        *,
        employee_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        status: Optional[ShiftStatus] = None,
        newest_first: bool = True,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["1=1"]
        params: list[object] = []

        if employee_id is not None:
            clauses.append("ar.employee_id=%s")
            params.append(int(employee_id))
        if start_date is not None:
            clauses.append("ar.work_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("ar.work_date <= %s")
            params.append(end_date)
        if status is not None:
            clauses.append("ar.status=%s")
            params.append(status.value)

        where = " AND ".join(clauses)
        direction = "DESC" if newest_first else "ASC"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {_SELECT}
                WHERE {where}
                ORDER BY ar.work_date {direction}, ar.shift_number ASC, e.name ASC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def create_clock_in(self, *, employee_id: int, work_date: date, shift_number: int, clock_in: datetime) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        employee_id, work_date, shift_number, clock_in,
                        break_minutes, work_minutes, is_overnight, status
                    )
                    VALUES(%s,%s,%s,%s,0,0,0,%s)
                    """,
                    (int(employee_id), work_date, int(shift_number), clock_in, ShiftStatus.WORKING.value),
                )
                return int(cur.lastrowid)
        except mysql_errors.IntegrityError as e:
            # uq_attendance_open_shift / uq_attendance_shift lost a race with another clock-in
            log.warning("Clock-in rejected by constraint for employee %s: %s", employee_id, e.msg)
            raise ValidationError("既に出勤中です") from e

    def close_shift(
        self,
        *,
        attendance_id: int,
        clock_out: datetime,
        result: WorkTimeResult,
        note: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET clock_out=%s, break_minutes=%s, work_minutes=%s, is_overnight=%s, status=%s, note=%s
                WHERE attendance_id=%s AND status=%s
                """,
                (
                    clock_out,
                    result.break_minutes,
                    result.work_minutes,
                    1 if result.is_overnight else 0,
                    ShiftStatus.COMPLETED.value,
                    note,
                    int(attendance_id),
                    ShiftStatus.WORKING.value,
                ),
            )
            return cur.rowcount > 0

    def update_record(self, attendance_id: int, *, fields: Mapping[str, object]) -> bool:
        unknown = set(fields) - CORRECTABLE_COLUMNS
        if unknown:
            raise ValueError(f"Not correctable: {sorted(unknown)}")

        sets: list[str] = []
        params: list[object] = []
        for column, value in fields.items():
            if isinstance(value, ShiftStatus):
                value = value.value
            elif isinstance(value, bool):
                value = 1 if value else 0
            sets.append(f"{column}=%s")
            params.append(value)
        # Touch updated_at even when nothing else changes so rowcount reflects existence.
        sets.append("updated_at=CURRENT_TIMESTAMP")
        params.append(int(attendance_id))

        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"UPDATE attendance_records SET {', '.join(sets)} WHERE attendance_id=%s",
                    tuple(params),
                )
                if cur.rowcount > 0:
                    return True
                cur.execute("SELECT 1 AS found FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
                return fetchone(cur) is not None
        except mysql_errors.IntegrityError as e:
            if "uq_attendance_open_shift" in (e.msg or ""):
                raise ValidationError("既に出勤中です") from e
            raise ValidationError("同じ日付・シフト番号の勤務記録が既に存在します") from e

    def delete(self, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            return cur.rowcount > 0
