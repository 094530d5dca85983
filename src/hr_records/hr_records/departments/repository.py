from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import Department


class DepartmentRepository(Protocol):
    def get_by_id(self, department_id: int) -> Optional[Department]:
        raise NotImplementedError

    def get_by_name(self, name: str) -> Optional[Department]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Department]:
        raise NotImplementedError

    def list_children(self, parent_id: int) -> Sequence[Department]:
        raise NotImplementedError

    def create(
        self,
        *,
        name: str,
        description: Optional[str],
        manager_id: Optional[int],
        parent_id: Optional[int],
    ) -> int:
        raise NotImplementedError

    def update(self, *, department_id: int, changes: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def set_manager(self, *, department_id: int, manager_id: Optional[int]) -> bool:
        raise NotImplementedError

    def delete(self, *, department_id: int) -> bool:
        raise NotImplementedError
