"""Authorization Resolver.

Every scope decision in the service layer goes through this module: the
broadest scope a principal holds for (resource, action) is computed once and
compared against the target's owner/department.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..core.enums import Action, DenyReason, Resource, Scope
from ..core.exceptions import AuthorizationError
from ..rbac.model import Principal

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Target:
    """What the resolver needs to know about the entity being accessed."""

    owner_id: Optional[int] = None
    department_id: Optional[int] = None


@dataclass(frozen=True)
class Decision:
    allowed: bool
    scope: Optional[Scope] = None
    reason: Optional[DenyReason] = None

    def __bool__(self) -> bool:
        return self.allowed

    @classmethod
    def allow(cls, scope: Scope) -> "Decision":
        return cls(True, scope, None)

    @classmethod
    def deny(cls, reason: DenyReason, scope: Optional[Scope] = None) -> "Decision":
        return cls(False, scope, reason)


_DENY_MESSAGES = {
    DenyReason.NO_PERMISSION: "Permission denied: {action} on {resource}",
    DenyReason.CROSS_DEPARTMENT: "Permission denied: {action} on {resource} outside your department",
    DenyReason.NOT_OWNER: "Permission denied: {action} on {resource} you do not own",
}


def effective_scope(principal: Principal, resource: Resource, action: Action) -> Optional[Scope]:
    """Broadest scope granted for (resource, action), or None.

    All held permissions are scanned so the answer never depends on their order.
    """
    return Scope.broadest(p.scope for p in principal.permissions if p.resource == resource and p.action == action)


def decide(scope: Optional[Scope], principal: Principal, target: Optional[Target]) -> Decision:
    if scope is None:
        return Decision.deny(DenyReason.NO_PERMISSION)
    if scope is Scope.ALL:
        return Decision.allow(scope)
    if scope is Scope.DEPARTMENT:
        # A target without a department is never treated as OWN.
        if (
            target is not None
            and target.department_id is not None
            and principal.department_id is not None
            and target.department_id == principal.department_id
        ):
            return Decision.allow(scope)
        return Decision.deny(DenyReason.CROSS_DEPARTMENT, scope)
    if target is not None and target.owner_id is not None and int(target.owner_id) == principal.employee_id:
        return Decision.allow(scope)
    return Decision.deny(DenyReason.NOT_OWNER, scope)


def authorize(
    principal: Principal,
    resource: Resource,
    action: Action,
    target: Optional[Target] = None,
) -> Decision:
    decision = decide(effective_scope(principal, resource, action), principal, target)
    if not decision:
        log.debug(
            "Denied %s:%s for employee %s (scope=%s, reason=%s, target=%s)",
            resource.value,
            action.value,
            principal.employee_id,
            decision.scope.value if decision.scope else None,
            decision.reason.value if decision.reason else None,
            target,
        )
    return decision


def denial(resource: Resource, action: Action, reason: DenyReason, message: Optional[str] = None) -> AuthorizationError:
    text = message or _DENY_MESSAGES.get(reason, "Permission denied").format(
        action=action.value.lower(), resource=resource.value.lower()
    )
    return AuthorizationError(text, reason=reason)


def require(
    principal: Principal,
    resource: Resource,
    action: Action,
    target: Optional[Target] = None,
    *,
    message: Optional[str] = None,
) -> Scope:
    """Like authorize(), but raises AuthorizationError on Deny and returns the effective scope."""
    decision = authorize(principal, resource, action, target)
    if not decision:
        raise denial(resource, action, decision.reason or DenyReason.NO_PERMISSION, message)
    return decision.scope


def require_any(principal: Principal, resource: Resource, action: Action) -> Scope:
    """Require that some scope is held, without looking at any target."""
    scope = effective_scope(principal, resource, action)
    if scope is None:
        log.debug("Denied %s:%s for employee %s (no permission)", resource.value, action.value, principal.employee_id)
        raise denial(resource, action, DenyReason.NO_PERMISSION)
    return scope


def require_scope(principal: Principal, resource: Resource, action: Action, minimum: Scope) -> Scope:
    scope = require_any(principal, resource, action)
    if not scope.includes(minimum):
        log.debug(
            "Denied %s:%s for employee %s (scope %s below %s)",
            resource.value,
            action.value,
            principal.employee_id,
            scope.value,
            minimum.value,
        )
        raise denial(resource, action, DenyReason.NO_PERMISSION)
    return scope
