from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from .model import Role


class RoleRepository(Protocol):
    """Role storage. Roles come back with their permission set resolved."""

    def get_by_id(self, role_id: int) -> Optional[Role]:
        raise NotImplementedError

    def get_by_name(self, name: str) -> Optional[Role]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Role]:
        raise NotImplementedError

    def create_role(self, *, name: str, description: Optional[str], permission_names: Iterable[str]) -> int:
        raise NotImplementedError

    def add_permission(self, *, role_id: int, permission_name: str) -> bool:
        raise NotImplementedError

    def remove_permission(self, *, role_id: int, permission_name: str) -> bool:
        raise NotImplementedError
