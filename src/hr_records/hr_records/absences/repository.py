from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import AbsenceStatus, AbsenceType
from .model import Absence


class AbsenceRepository(Protocol):
    """Repository interface for Absence.

    transition() succeeds only when the stored row is still PENDING and still
    carries expected_version; it bumps the version.
    """

    def create(
        self,
        *,
        employee_id: int,
        absence_type: AbsenceType,
        start_date: date,
        end_date: date,
        reason: Optional[str],
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, absence_id: int) -> Optional[Absence]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int) -> Sequence[Absence]:
        raise NotImplementedError

    def list_absences(
        self,
        *,
        status: Optional[AbsenceStatus] = None,
        department_id: Optional[int] = None,
        employee_id: Optional[int] = None,
    ) -> Sequence[Absence]:
        raise NotImplementedError

    def find_overlapping(
        self,
        *,
        employee_id: int,
        start_date: date,
        end_date: date,
        statuses: Iterable[AbsenceStatus],
    ) -> Sequence[Absence]:
        raise NotImplementedError

    def transition(
        self,
        *,
        absence_id: int,
        expected_version: int,
        status: AbsenceStatus,
        reviewer_id: Optional[int] = None,
        reviewed_at: Optional[datetime] = None,
        review_comment: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError
