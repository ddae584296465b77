from __future__ import annotations

import os
from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest

os.environ["APP_ENV"] = "testing"

from src.timeclock.timeclock.attendance.model import AttendanceRecord
from src.timeclock.timeclock.container import wire_container
from src.timeclock.timeclock.core.enums import ShiftStatus
from src.timeclock.timeclock.core.exceptions import ValidationError
from src.timeclock.timeclock.employees.model import Employee
from src.timeclock.timeclock.main import create_app

ADMIN_PASSWORD = "test-admin"


class InMemoryEmployees:
    def __init__(self):
        self._by_id: dict[int, Employee] = {}
        self._id = 0
        self.deleted: list[int] = []

    def add(self, name: str, *, is_active: bool = True) -> Employee:
        self._id += 1
        employee = Employee(employee_id=self._id, name=name, is_active=is_active)
        self._by_id[self._id] = employee
        return employee

    def list_all(self, *, include_inactive: bool = False):
        items = [e for e in self._by_id.values() if include_inactive or e.is_active]
        return sorted(items, key=lambda e: e.name)

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self._by_id.get(int(employee_id))

    def create(self, *, name: str) -> int:
        return self.add(name).employee_id

    def update(self, employee_id: int, *, name=None, is_active=None) -> bool:
        current = self._by_id.get(int(employee_id))
        if not current:
            return False
        changes = {}
        if name is not None:
            changes["name"] = name
        if is_active is not None:
            changes["is_active"] = is_active
        self._by_id[current.employee_id] = replace(current, **changes)
        return True

    def delete_permanently(self, employee_id: int) -> bool:
        self.deleted.append(int(employee_id))
        return self._by_id.pop(int(employee_id), None) is not None


class InMemoryAttendance:
    """Mirrors the MySQL repository, including the one-open-shift unique key."""

    def __init__(self, employees: InMemoryEmployees):
        self._employees = employees
        self._by_id: dict[int, AttendanceRecord] = {}
        self._id = 0

    def _with_name(self, r: AttendanceRecord) -> AttendanceRecord:
        employee = self._employees.get_by_id(r.employee_id)
        return replace(r, employee_name=employee.name if employee else None)

    def add(self, **kwargs) -> AttendanceRecord:
        self._id += 1
        defaults = dict(
            attendance_id=self._id,
            shift_number=1,
            clock_out=None,
            break_minutes=0,
            work_minutes=0,
            is_overnight=False,
            status=ShiftStatus.WORKING,
        )
        defaults.update(kwargs)
        record = AttendanceRecord(**defaults)
        self._by_id[record.attendance_id] = record
        return record

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        r = self._by_id.get(int(attendance_id))
        return self._with_name(r) if r else None

    def get_open_for_employee(self, employee_id: int) -> Optional[AttendanceRecord]:
        items = [r for r in self._by_id.values() if r.employee_id == employee_id and r.is_open]
        items.sort(key=lambda r: r.clock_in, reverse=True)
        return self._with_name(items[0]) if items else None

    def get_last_shift_number(self, employee_id: int, work_date: date) -> int:
        numbers = [r.shift_number for r in self._by_id.values() if r.employee_id == employee_id and r.work_date == work_date]
        return max(numbers, default=0)

    def list_for_employee_and_date(self, employee_id: int, work_date: date):
        items = [r for r in self._by_id.values() if r.employee_id == employee_id and r.work_date == work_date]
        return [self._with_name(r) for r in sorted(items, key=lambda r: r.shift_number)]

    def search(self, *, employee_id=None, start_date=None, end_date=None, status=None, newest_first=True):
        items = list(self._by_id.values())
        if employee_id is not None:
            items = [r for r in items if r.employee_id == employee_id]
        if start_date is not None:
            items = [r for r in items if r.work_date >= start_date]
        if end_date is not None:
            items = [r for r in items if r.work_date <= end_date]
        if status is not None:
            items = [r for r in items if r.status == status]
        items.sort(key=lambda r: r.shift_number)
        items.sort(key=lambda r: r.work_date, reverse=newest_first)
        return [self._with_name(r) for r in items]

    def create_clock_in(self, *, employee_id: int, work_date: date, shift_number: int, clock_in: datetime) -> int:
        if any(r.employee_id == employee_id and r.is_open for r in self._by_id.values()):
            raise ValidationError("既に出勤中です")
        return self.add(
            employee_id=employee_id,
            work_date=work_date,
            shift_number=shift_number,
            clock_in=clock_in,
        ).attendance_id

    def close_shift(self, *, attendance_id: int, clock_out: datetime, result, note=None) -> bool:
        r = self._by_id.get(attendance_id)
        if not r or not r.is_open:
            return False
        self._by_id[attendance_id] = replace(
            r,
            clock_out=clock_out,
            break_minutes=result.break_minutes,
            work_minutes=result.work_minutes,
            is_overnight=result.is_overnight,
            status=ShiftStatus.COMPLETED,
            note=note,
        )
        return True

    def update_record(self, attendance_id: int, *, fields) -> bool:
        r = self._by_id.get(int(attendance_id))
        if not r:
            return False
        self._by_id[r.attendance_id] = replace(r, **fields)
        return True

    def delete(self, attendance_id: int) -> bool:
        return self._by_id.pop(int(attendance_id), None) is not None


class InMemorySettings:
    def __init__(self):
        self.values: dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def upsert(self, key: str, value: str) -> None:
        self.values[key] = value


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 1, 20, 9, 0, 0)


@pytest.fixture
def employees_repo() -> InMemoryEmployees:
    return InMemoryEmployees()


@pytest.fixture
def attendance_repo(employees_repo) -> InMemoryAttendance:
    return InMemoryAttendance(employees_repo)


@pytest.fixture
def settings_repo() -> InMemorySettings:
    return InMemorySettings()


@pytest.fixture
def container(employees_repo, attendance_repo, settings_repo):
    return wire_container(
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        settings_repo=settings_repo,
        admin_password=ADMIN_PASSWORD,
    )


@pytest.fixture
def app(container):
    return create_app(container=container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(client):
    resp = client.post("/api/auth/verify", json={"password": ADMIN_PASSWORD})
    assert resp.status_code == 200
    return client
