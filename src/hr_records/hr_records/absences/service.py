from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..authz.filters import listing_scope
from ..authz.resolver import Target, denial, require, require_any
from ..common.datetime_utils import now_local
from ..common.validators import optional_text, require_date_range, require_int, require_max_length
from ..core.constants import ABSENCE_REASON_MAX_LENGTH, REVIEW_COMMENT_MAX_LENGTH
from ..core.enums import AbsenceStatus, AbsenceType, Action, DenyReason, Resource
from ..core.exceptions import ConcurrentModificationError, ConflictError, NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..rbac.model import Principal
from .model import Absence
from .policy import BLOCKING_STATUSES, ensure_transition, parse_decision
from .repository import AbsenceRepository

log = logging.getLogger(__name__)


def to_representation(absence: Absence) -> dict:
    return {
        "id": absence.absence_id,
        "employee_id": absence.employee_id,
        "type": absence.absence_type.value,
        "start_date": absence.start_date.isoformat(),
        "end_date": absence.end_date.isoformat(),
        "duration_days": absence.duration_days,
        "reason": absence.reason,
        "status": absence.status.value,
        "reviewer_id": absence.reviewer_id,
        "reviewed_at": absence.reviewed_at.isoformat() if absence.reviewed_at else None,
        "review_comment": absence.review_comment,
        "created_at": absence.created_at.isoformat() if absence.created_at else None,
        "version": absence.version,
    }


def _parse_type(value) -> AbsenceType:
    if isinstance(value, AbsenceType):
        return value
    try:
        return AbsenceType(str(value or "").strip().upper())
    except ValueError:
        raise ValidationError(f"Invalid absence type: {value!r}")


class AbsenceService:
    """Use case: absence (leave) requests.

    Every check runs before the single write; a failed check leaves no trace.
    """

    def __init__(self, absences: AbsenceRepository, employees: EmployeeRepository):
        self._absences = absences
        self._employees = employees

    def _get_or_404(self, absence_id: int) -> Absence:
        absence = self._absences.get_by_id(int(absence_id))
        if not absence:
            raise NotFoundError(f"Absence not found with id: {absence_id}")
        return absence

    def _owner_of(self, absence: Absence) -> Employee:
        owner = self._employees.get_by_id(absence.employee_id)
        if not owner:
            raise NotFoundError(f"Employee not found with id: {absence.employee_id}")
        return owner

    def submit_absence(
        self,
        principal: Principal,
        *,
        absence_type,
        start_date: date,
        end_date: date,
        reason: Optional[str] = None,
    ) -> Absence:
        kind = _parse_type(absence_type)
        require_date_range(start_date, end_date)
        reason = require_max_length(optional_text(reason, "Reason"), "Reason", ABSENCE_REASON_MAX_LENGTH)

        require(
            principal,
            Resource.ABSENCE,
            Action.CREATE,
            Target(owner_id=principal.employee_id, department_id=principal.department_id),
        )
        if not self._employees.get_by_id(principal.employee_id):
            raise NotFoundError(f"Employee not found with id: {principal.employee_id}")

        clashes = self._absences.find_overlapping(
            employee_id=principal.employee_id,
            start_date=start_date,
            end_date=end_date,
            statuses=BLOCKING_STATUSES,
        )
        if clashes:
            raise ConflictError("You already have an absence request for this period")

        absence_id = self._absences.create(
            employee_id=principal.employee_id,
            absence_type=kind,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
        )
        log.info(
            "Absence %s submitted by employee %s (%s, %s..%s)",
            absence_id,
            principal.employee_id,
            kind.value,
            start_date,
            end_date,
        )
        return self._get_or_404(absence_id)

    def review_absence(
        self,
        principal: Principal,
        absence_id: int,
        *,
        decision,
        comment: Optional[str] = None,
        expected_version: Optional[int] = None,
    ) -> Absence:
        status = parse_decision(decision)
        comment = require_max_length(optional_text(comment, "Comment"), "Comment", REVIEW_COMMENT_MAX_LENGTH)

        require_any(principal, Resource.ABSENCE, Action.APPROVE)
        absence = self._get_or_404(absence_id)
        owner = self._owner_of(absence)
        require(
            principal,
            Resource.ABSENCE,
            Action.APPROVE,
            Target(owner_id=owner.employee_id, department_id=owner.department_id),
        )

        # Reviews never cross a department boundary, whatever scope is held.
        if principal.department_id is None or principal.department_id != owner.department_id:
            raise denial(
                Resource.ABSENCE,
                Action.APPROVE,
                DenyReason.CROSS_DEPARTMENT,
                "You can only review absence requests from your department",
            )

        ensure_transition(absence.status, status)
        version = absence.version if expected_version is None else require_int(expected_version, "Version")
        if version != absence.version:
            raise ConcurrentModificationError("Absence", absence.absence_id, version)

        if not self._absences.transition(
            absence_id=absence.absence_id,
            expected_version=version,
            status=status,
            reviewer_id=principal.employee_id,
            reviewed_at=now_local(),
            review_comment=comment,
        ):
            raise ConcurrentModificationError("Absence", absence.absence_id, version)

        log.info("Absence %s %s by employee %s", absence.absence_id, status.value.lower(), principal.employee_id)
        return self._get_or_404(absence.absence_id)

    def cancel_absence(self, principal: Principal, absence_id: int, *, expected_version: Optional[int] = None) -> Absence:
        require_any(principal, Resource.ABSENCE, Action.DELETE)
        absence = self._get_or_404(absence_id)
        owner = self._owner_of(absence)
        require(
            principal,
            Resource.ABSENCE,
            Action.DELETE,
            Target(owner_id=owner.employee_id, department_id=owner.department_id),
        )
        if owner.employee_id != principal.employee_id:
            raise denial(
                Resource.ABSENCE,
                Action.DELETE,
                DenyReason.NOT_OWNER,
                "You can only cancel your own absence requests",
            )

        ensure_transition(absence.status, AbsenceStatus.CANCELLED)
        version = absence.version if expected_version is None else require_int(expected_version, "Version")
        if version != absence.version:
            raise ConcurrentModificationError("Absence", absence.absence_id, version)

        if not self._absences.transition(
            absence_id=absence.absence_id,
            expected_version=version,
            status=AbsenceStatus.CANCELLED,
        ):
            raise ConcurrentModificationError("Absence", absence.absence_id, version)

        log.info("Absence %s cancelled by employee %s", absence.absence_id, principal.employee_id)
        return self._get_or_404(absence.absence_id)

    def get_absence(self, principal: Principal, absence_id: int) -> Absence:
        require_any(principal, Resource.ABSENCE, Action.READ)
        absence = self._get_or_404(absence_id)
        owner = self._owner_of(absence)
        require(
            principal,
            Resource.ABSENCE,
            Action.READ,
            Target(owner_id=owner.employee_id, department_id=owner.department_id),
        )
        return absence

    def list_my_absences(self, principal: Principal) -> Sequence[Absence]:
        require_any(principal, Resource.ABSENCE, Action.READ)
        return self._absences.list_for_employee(principal.employee_id)

    def list_absences(self, principal: Principal, *, status: Optional[AbsenceStatus] = None) -> Sequence[Absence]:
        restriction = listing_scope(principal, Resource.ABSENCE, Action.READ)
        if restriction.matches_nothing:
            return []
        return self._absences.list_absences(
            status=status,
            department_id=restriction.department_id,
            employee_id=restriction.owner_id,
        )

    def list_pending(self, principal: Principal) -> Sequence[Absence]:
        return self.list_absences(principal, status=AbsenceStatus.PENDING)
