from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.validators import require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from .model import Employee
from .repository import EmployeeRepository

log = logging.getLogger(__name__)


class EmployeeService:
    """Use case: manage employees (admin)."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def list_employees(self, *, include_inactive: bool = False) -> Sequence[Employee]:
        return self._employees.list_all(include_inactive=include_inactive)

    def get_employee(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("従業員が見つかりません")
        return employee

    def create_employee(self, name: Optional[str]) -> Employee:
        name = require_non_empty(name, "名前が必要です")
        employee_id = self._employees.create(name=name)
        log.info("Created employee %s (%s)", employee_id, name)
        return self.get_employee(employee_id)

    def update_employee(
        self,
        employee_id: int,
        *,
        name: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> Employee:
        if name is not None:
            name = require_non_empty(name, "名前が必要です")
        if not self._employees.update(employee_id, name=name, is_active=is_active):
            raise NotFoundError("従業員が見つかりません")
        return self.get_employee(employee_id)

    def deactivate_employee(self, employee_id: int) -> Employee:
        """Soft delete: the employee disappears from the punch screen only."""
        employee = self.update_employee(employee_id, is_active=False)
        log.info("Deactivated employee %s", employee_id)
        return employee

    def delete_employee_permanently(self, employee_id: int) -> None:
        employee = self.get_employee(employee_id)
        if employee.is_active:
            raise ValidationError("有効な従業員は完全削除できません。先に無効化してください。")
        if not self._employees.delete_permanently(employee_id):
            raise NotFoundError("従業員が見つかりません")
        log.info("Permanently deleted employee %s", employee_id)
