"""Who may leave feedback for whom."""
from __future__ import annotations

from typing import Optional

from ..authz.resolver import Decision, Target, decide
from ..core.enums import DenyReason, Scope
from ..employees.model import Employee
from ..rbac.model import Principal


def feedback_eligibility(
    principal: Principal,
    scope: Optional[Scope],
    target: Employee,
    *,
    manager_role_name: str,
) -> Decision:
    """Decide a feedback submission by the principal about target.

    ALL-scope authors skip the peer rules. Everyone else must reach the target
    through their scope, must not be the target, and may not rate a manager.
    """
    if scope is Scope.ALL:
        return Decision.allow(scope)

    decision = decide(scope, principal, Target(owner_id=target.employee_id, department_id=target.department_id))
    if not decision:
        return decision
    if target.employee_id == principal.employee_id:
        return Decision.deny(DenyReason.INELIGIBLE, scope)
    if target.role_name == manager_role_name:
        return Decision.deny(DenyReason.INELIGIBLE, scope)
    return decision
