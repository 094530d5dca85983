from __future__ import annotations

from enum import Enum
from typing import Optional


class Resource(str, Enum):
    """Resource types that permissions are granted on."""

    EMPLOYEE = "EMPLOYEE"
    ABSENCE = "ABSENCE"
    FEEDBACK = "FEEDBACK"
    DEPARTMENT = "DEPARTMENT"
    ROLE = "ROLE"


class Action(str, Enum):
    CREATE = "CREATE"
    READ = "READ"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    APPROVE = "APPROVE"


class Scope(str, Enum):
    """Breadth of a grant, ordered OWN < DEPARTMENT < ALL."""

    OWN = "OWN"
    DEPARTMENT = "DEPARTMENT"
    ALL = "ALL"

    @property
    def rank(self) -> int:
        return _SCOPE_RANK[self]

    def includes(self, other: "Scope") -> bool:
        return self.rank >= Scope(other).rank

    @classmethod
    def broadest(cls, scopes) -> Optional["Scope"]:
        best: Optional[Scope] = None
        for s in scopes:
            if best is None or s.rank > best.rank:
                best = s
        return best


_SCOPE_RANK = {Scope.OWN: 0, Scope.DEPARTMENT: 1, Scope.ALL: 2}


class AbsenceStatus(str, Enum):
    """Lifecycle of an absence request."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        return self is not AbsenceStatus.PENDING


class AbsenceType(str, Enum):
    VACATION = "VACATION"
    SICK_LEAVE = "SICK_LEAVE"
    PERSONAL_LEAVE = "PERSONAL_LEAVE"
    PARENTAL_LEAVE = "PARENTAL_LEAVE"
    UNPAID_LEAVE = "UNPAID_LEAVE"
    REMOTE_WORK = "REMOTE_WORK"


class DenyReason(str, Enum):
    NO_PERMISSION = "no-permission"
    CROSS_DEPARTMENT = "cross-department"
    NOT_OWNER = "not-owner"
    INELIGIBLE = "ineligible"
