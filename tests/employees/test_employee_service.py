from __future__ import annotations

import pytest

from src.timeclock.timeclock.core.exceptions import NotFoundError, ValidationError
from src.timeclock.timeclock.employees.service import EmployeeService


@pytest.fixture
def svc(employees_repo):
    return EmployeeService(employees_repo)


def test_create_trims_name(svc):
    employee = svc.create_employee("  佐藤花子 ")
    assert employee.name == "佐藤花子"
    assert employee.is_active is True


@pytest.mark.parametrize("name", [None, "", "   "])
def test_create_requires_name(svc, name):
    with pytest.raises(ValidationError):
        svc.create_employee(name)


def test_list_hides_inactive_by_default(svc, employees_repo):
    employees_repo.add("B")
    employees_repo.add("A", is_active=False)

    assert [e.name for e in svc.list_employees()] == ["B"]
    assert [e.name for e in svc.list_employees(include_inactive=True)] == ["A", "B"]


def test_update_name_and_flag(svc, employees_repo):
    e = employees_repo.add("旧姓")
    updated = svc.update_employee(e.employee_id, name="新姓", is_active=False)
    assert updated.name == "新姓"
    assert updated.is_active is False


def test_update_missing_employee(svc):
    with pytest.raises(NotFoundError):
        svc.update_employee(99, name="x")


def test_deactivate_is_soft_delete(svc, employees_repo):
    e = employees_repo.add("X")
    svc.deactivate_employee(e.employee_id)
    assert employees_repo.get_by_id(e.employee_id).is_active is False
    assert employees_repo.deleted == []


def test_permanent_delete_requires_inactive(svc, employees_repo):
    e = employees_repo.add("X")
    with pytest.raises(ValidationError, match="先に無効化してください"):
        svc.delete_employee_permanently(e.employee_id)

    svc.deactivate_employee(e.employee_id)
    svc.delete_employee_permanently(e.employee_id)
    assert employees_repo.get_by_id(e.employee_id) is None
