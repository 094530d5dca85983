from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AbsenceStatus, AbsenceType


@dataclass(frozen=True)
class Absence:
    """Domain entity: an absence (leave) request owned by one employee.

    owner_department_id is the owner's current department as read alongside
    the row; it is informational and never written back.
    """

    absence_id: int
    employee_id: int
    absence_type: AbsenceType
    start_date: date
    end_date: date
    status: AbsenceStatus = AbsenceStatus.PENDING
    reason: Optional[str] = None
    reviewer_id: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    review_comment: Optional[str] = None
    created_at: Optional[datetime] = None
    version: int = 0
    owner_department_id: Optional[int] = None

    @property
    def duration_days(self) -> int:
        return (self.end_date - self.start_date).days + 1
