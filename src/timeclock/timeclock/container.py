from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .auth.service import AdminAuthService
from .core.constants import DEFAULT_TIMEZONE
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService
from .reports.service import MonthlyReportService
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .settings.repository import SettingsRepository


@dataclass(frozen=True)
class Container:
    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository
    settings_repo: SettingsRepository

    employee_service: EmployeeService
    attendance_service: AttendanceService
    report_service: MonthlyReportService
    admin_auth_service: AdminAuthService

    timezone: str = DEFAULT_TIMEZONE


def wire_container(
    *,
    employees_repo: EmployeeRepository,
    attendance_repo: AttendanceRepository,
    settings_repo: SettingsRepository,
    admin_password: Optional[str] = None,
    tz_name: str = DEFAULT_TIMEZONE,
) -> Container:
    """Build services on top of any repository implementations."""
    return Container(
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        settings_repo=settings_repo,
        employee_service=EmployeeService(employees_repo),
        attendance_service=AttendanceService(attendance_repo, employees_repo, tz_name=tz_name),
        report_service=MonthlyReportService(attendance_repo),
        admin_auth_service=AdminAuthService(settings_repo, fallback_password=admin_password),
        timezone=tz_name,
    )


def build_container(*, db_config: dict, admin_password: Optional[str] = None, tz_name: str = DEFAULT_TIMEZONE) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return wire_container(
        employees_repo=MySQLEmployeeRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        settings_repo=MySQLSettingsRepository(conn),
        admin_password=admin_password,
        tz_name=tz_name,
    )
