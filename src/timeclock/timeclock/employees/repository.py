from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    """Repository interface for Employee.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def list_all(self, *, include_inactive: bool = False) -> Sequence[Employee]:
        raise NotImplementedError

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def create(self, *, name: str) -> int:
        raise NotImplementedError

    def update(self, employee_id: int, *, name: Optional[str] = None, is_active: Optional[bool] = None) -> bool:
        raise NotImplementedError

    def delete_permanently(self, employee_id: int) -> bool:
        """Remove the employee together with all of their shift records."""

        raise NotImplementedError
