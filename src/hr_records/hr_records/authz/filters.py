"""Collection Filter: turns an effective scope into a listing restriction."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Optional, TypeVar

from ..core.enums import Action, DenyReason, Resource, Scope
from ..rbac.model import Principal
from .resolver import denial, effective_scope

T = TypeVar("T")


@dataclass(frozen=True)
class ListingScope:
    scope: Scope
    department_id: Optional[int] = None
    owner_id: Optional[int] = None
    matches_nothing: bool = False

    @property
    def is_unrestricted(self) -> bool:
        return not self.matches_nothing and self.department_id is None and self.owner_id is None

    def admits(self, *, owner_id: Optional[int], department_id: Optional[int]) -> bool:
        if self.matches_nothing:
            return False
        if self.owner_id is not None and owner_id != self.owner_id:
            return False
        if self.department_id is not None and department_id != self.department_id:
            return False
        return True


def listing_scope(
    principal: Principal,
    resource: Resource,
    action: Action,
    *,
    requested_department_id: Optional[int] = None,
) -> ListingScope:
    """Decide what a listing may contain.

    Raises AuthorizationError when no scope is held at all, which is distinct
    from a restriction that happens to match nothing.
    """
    scope = effective_scope(principal, resource, action)
    if scope is None:
        raise denial(resource, action, DenyReason.NO_PERMISSION)

    if scope is Scope.ALL:
        return ListingScope(scope, department_id=requested_department_id)

    if scope is Scope.DEPARTMENT:
        if requested_department_id is not None and requested_department_id != principal.department_id:
            raise denial(resource, action, DenyReason.CROSS_DEPARTMENT)
        if principal.department_id is None:
            return ListingScope(scope, matches_nothing=True)
        return ListingScope(scope, department_id=principal.department_id)

    return ListingScope(scope, department_id=requested_department_id, owner_id=principal.employee_id)


def filter_visible(
    principal: Principal,
    resource: Resource,
    action: Action,
    items: Iterable[T],
    *,
    owner_of: Callable[[T], Optional[int]],
    department_of: Callable[[T], Optional[int]],
) -> list[T]:
    """Apply listing_scope() to an already-fetched collection."""
    restriction = listing_scope(principal, resource, action)
    if restriction.is_unrestricted:
        return list(items)
    return [it for it in items if restriction.admits(owner_id=owner_of(it), department_id=department_of(it))]
