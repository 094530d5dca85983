"""Absence lifecycle rules.

PENDING is the only state with outgoing edges; every other state is terminal
and is entered at most once.
"""
from __future__ import annotations

from datetime import date
from typing import Mapping

from ..core.enums import AbsenceStatus
from ..core.exceptions import ConflictError, ValidationError

TRANSITIONS: Mapping[AbsenceStatus, frozenset[AbsenceStatus]] = {
    AbsenceStatus.PENDING: frozenset({AbsenceStatus.APPROVED, AbsenceStatus.REJECTED, AbsenceStatus.CANCELLED}),
    AbsenceStatus.APPROVED: frozenset(),
    AbsenceStatus.REJECTED: frozenset(),
    AbsenceStatus.CANCELLED: frozenset(),
}

REVIEW_DECISIONS = frozenset({AbsenceStatus.APPROVED, AbsenceStatus.REJECTED})

# Statuses that block another absence over the same days.
BLOCKING_STATUSES = (AbsenceStatus.PENDING, AbsenceStatus.APPROVED)


def can_transition(current: AbsenceStatus, new: AbsenceStatus) -> bool:
    return new in TRANSITIONS.get(current, frozenset())


def ensure_transition(current: AbsenceStatus, new: AbsenceStatus) -> None:
    if not can_transition(current, new):
        raise ConflictError(f"Absence request is already {current.value.lower()}")


def parse_decision(decision) -> AbsenceStatus:
    """Normalize a review decision; only APPROVED and REJECTED are accepted."""
    if isinstance(decision, AbsenceStatus):
        status = decision
    else:
        try:
            status = AbsenceStatus(str(decision or "").strip().upper())
        except ValueError:
            raise ValidationError(f"Invalid review decision: {decision!r}")

    if status is AbsenceStatus.PENDING:
        raise ConflictError("Cannot set status back to PENDING")
    if status is AbsenceStatus.CANCELLED:
        raise ValidationError("Use cancellation to cancel an absence request")
    return status


def overlaps(start_a: date, end_a: date, start_b: date, end_b: date) -> bool:
    """Inclusive date-range overlap: a shared single day counts."""
    return start_a <= end_b and start_b <= end_a
