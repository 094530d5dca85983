from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    """Repository interface for Employee.

    Update methods take the version the caller read and return False when the
    stored version differs (optimistic locking).
    """

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def list_active(self) -> Sequence[Employee]:
        raise NotImplementedError

    def list_by_department(self, department_id: int, *, active_only: bool = True) -> Sequence[Employee]:
        raise NotImplementedError

    def search(self, keyword: str) -> Sequence[Employee]:
        """Active employees whose first/last name or e-mail contains keyword (case-insensitive)."""

        raise NotImplementedError

    def count_by_department(self, department_id: int) -> int:
        raise NotImplementedError

    def update_profile(self, *, employee_id: int, expected_version: int, changes: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def set_active(self, *, employee_id: int, is_active: bool, expected_version: int) -> bool:
        raise NotImplementedError

    def set_role(self, *, employee_id: int, role_id: int, expected_version: int) -> bool:
        raise NotImplementedError
