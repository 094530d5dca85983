from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """Domain entity: Employee.

    Pure data object (no DB access). role_id and department_id are always set
    once the employee has been created; department_id stays Optional because
    legacy rows may lack it and the engine must deny rather than crash.
    """

    employee_id: int
    first_name: str
    last_name: str
    email: str
    role_id: int
    role_name: str
    department_id: Optional[int]
    position: Optional[str] = None
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    hire_date: Optional[date] = None
    bio: Optional[str] = None
    skills: Optional[str] = None
    is_active: bool = True
    version: int = 0

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
