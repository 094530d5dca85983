"""Field Redactor for employee representations.

Works on the outgoing representation only; stored entities are never touched.
"""
from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

from ..core.constants import SENSITIVE_EMPLOYEE_FIELDS
from ..core.enums import Action, Resource, Scope
from ..rbac.model import Principal
from .resolver import effective_scope


def _reads_everything(principal: Principal) -> bool:
    return effective_scope(principal, Resource.EMPLOYEE, Action.READ) is Scope.ALL


def _apply(representation: Mapping[str, Any], privileged: bool, viewer_id: int) -> dict:
    out = dict(representation)
    if privileged or out.get("id") == viewer_id:
        return out
    for name in SENSITIVE_EMPLOYEE_FIELDS:
        if name in out:
            out[name] = None
    return out


def can_view_sensitive(principal: Principal, subject_id: Optional[int]) -> bool:
    return _reads_everything(principal) or subject_id == principal.employee_id


def redact(principal: Principal, representation: Mapping[str, Any]) -> dict:
    return _apply(representation, _reads_everything(principal), principal.employee_id)


def redact_all(principal: Principal, representations: Iterable[Mapping[str, Any]]) -> list[dict]:
    privileged = _reads_everything(principal)
    return [_apply(r, privileged, principal.employee_id) for r in representations]
