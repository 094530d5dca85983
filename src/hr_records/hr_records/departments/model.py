from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Department:
    department_id: int
    name: str
    description: Optional[str] = None
    manager_id: Optional[int] = None
    parent_id: Optional[int] = None
    is_active: bool = True
