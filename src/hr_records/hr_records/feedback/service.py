from __future__ import annotations

import logging
from typing import Optional, Protocol, Sequence

from ..authz.resolver import Target, denial, require, require_any, require_scope
from ..common.validators import optional_text, require_int_between, require_length_between, require_max_length
from ..core.constants import (
    FEEDBACK_MAX_LENGTH,
    FEEDBACK_MAX_RATING,
    FEEDBACK_MIN_LENGTH,
    FEEDBACK_MIN_RATING,
    MANAGER_ROLE_NAME,
)
from ..core.enums import Action, DenyReason, Resource, Scope
from ..core.exceptions import NotFoundError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..rbac.model import Principal
from .model import Feedback
from .policy import feedback_eligibility
from .repository import FeedbackRepository

log = logging.getLogger(__name__)

CATEGORY_MAX_LENGTH = 50

_INELIGIBLE_MESSAGES = {
    "self": "You cannot give feedback to yourself",
    "manager": "Feedback cannot be given to managers",
}


class ContentEnhancer(Protocol):
    """Rewrites feedback text (for example a language-model polish step).

    Implementations live outside this package; failures are tolerated.
    """

    def enhance(self, content: str) -> str:
        raise NotImplementedError


def to_representation(feedback: Feedback) -> dict:
    return {
        "id": feedback.feedback_id,
        "employee_id": feedback.employee_id,
        "author_id": feedback.author_id,
        "author_name": feedback.author_name,
        "content": feedback.display_content,
        "original_content": feedback.content,
        "polished": feedback.is_polished,
        "rating": feedback.rating,
        "category": feedback.category,
        "visible": feedback.is_visible,
        "created_at": feedback.created_at.isoformat() if feedback.created_at else None,
    }


class FeedbackService:
    def __init__(
        self,
        feedback: FeedbackRepository,
        employees: EmployeeRepository,
        *,
        enhancer: Optional[ContentEnhancer] = None,
        manager_role_name: str = MANAGER_ROLE_NAME,
    ):
        self._feedback = feedback
        self._employees = employees
        self._enhancer = enhancer
        self._manager_role_name = manager_role_name

    def _employee_or_404(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError(f"Employee not found with id: {employee_id}")
        return employee

    def _polish(self, content: str) -> Optional[str]:
        if self._enhancer is None:
            log.debug("Feedback polish requested but no enhancer is configured")
            return None
        try:
            polished = (self._enhancer.enhance(content) or "").strip()
        except Exception:
            log.warning("Feedback enhancement failed; keeping original content", exc_info=True)
            return None
        return polished or None

    def submit_feedback(
        self,
        principal: Principal,
        employee_id: int,
        *,
        content: str,
        rating: Optional[int] = None,
        category: Optional[str] = None,
        polish: bool = False,
    ) -> Feedback:
        content = require_length_between(content, "Feedback content", FEEDBACK_MIN_LENGTH, FEEDBACK_MAX_LENGTH)
        rating = require_int_between(rating, "Rating", FEEDBACK_MIN_RATING, FEEDBACK_MAX_RATING)
        category = require_max_length(optional_text(category, "Category"), "Category", CATEGORY_MAX_LENGTH)

        scope = require_any(principal, Resource.FEEDBACK, Action.CREATE)
        target = self._employee_or_404(employee_id)
        self._employee_or_404(principal.employee_id)

        decision = feedback_eligibility(principal, scope, target, manager_role_name=self._manager_role_name)
        if not decision:
            message = None
            if decision.reason is DenyReason.INELIGIBLE:
                key = "self" if target.employee_id == principal.employee_id else "manager"
                message = _INELIGIBLE_MESSAGES[key]
            log.info(
                "Feedback by %s for %s denied (%s)",
                principal.employee_id,
                target.employee_id,
                decision.reason.value if decision.reason else None,
            )
            raise denial(Resource.FEEDBACK, Action.CREATE, decision.reason or DenyReason.NO_PERMISSION, message)

        polished = self._polish(content) if polish else None
        feedback_id = self._feedback.create(
            employee_id=target.employee_id,
            author_id=principal.employee_id,
            content=content,
            polished_content=polished,
            rating=rating,
            category=category,
        )
        log.info("Feedback %s submitted by %s for %s", feedback_id, principal.employee_id, target.employee_id)
        return self._feedback.get_by_id(feedback_id)

    def list_feedback_for_employee(self, principal: Principal, employee_id: int) -> Sequence[Feedback]:
        scope = require_any(principal, Resource.FEEDBACK, Action.READ)
        target = self._employee_or_404(employee_id)

        if scope is Scope.ALL:
            return self._feedback.list_for_employee(target.employee_id, include_hidden=True)
        # Being the target grants nothing; authors keep seeing their own entries, hidden or not.
        return [
            f
            for f in self._feedback.list_for_employee(target.employee_id, include_hidden=True)
            if f.author_id == principal.employee_id
        ]

    def list_my_feedback(self, principal: Principal) -> Sequence[Feedback]:
        require_any(principal, Resource.FEEDBACK, Action.READ)
        return self._feedback.list_by_author(principal.employee_id, include_hidden=True)

    def list_visible_feedback(self, principal: Principal) -> Sequence[Feedback]:
        scope = require_any(principal, Resource.FEEDBACK, Action.READ)
        if scope is Scope.ALL:
            return self._feedback.list_all(include_hidden=True)
        return self._feedback.list_by_author(principal.employee_id, include_hidden=True)

    def hide_feedback(self, principal: Principal, feedback_id: int) -> Feedback:
        require_scope(principal, Resource.FEEDBACK, Action.UPDATE, Scope.ALL)
        feedback = self._feedback.get_by_id(int(feedback_id))
        if not feedback:
            raise NotFoundError(f"Feedback not found with id: {feedback_id}")

        if feedback.is_visible:
            self._feedback.set_visible(feedback_id=feedback.feedback_id, is_visible=False)
            log.info("Feedback %s hidden by %s", feedback.feedback_id, principal.employee_id)
        return self._feedback.get_by_id(feedback.feedback_id)

    def delete_feedback(self, principal: Principal, feedback_id: int) -> None:
        """Remove an entry for good. OWN scope covers entries one authored; ALL covers any."""
        require_any(principal, Resource.FEEDBACK, Action.DELETE)
        feedback = self._feedback.get_by_id(int(feedback_id))
        if not feedback:
            raise NotFoundError(f"Feedback not found with id: {feedback_id}")
        require(
            principal,
            Resource.FEEDBACK,
            Action.DELETE,
            Target(owner_id=feedback.author_id),
            message="You can only delete feedback you have written",
        )

        self._feedback.delete(feedback_id=feedback.feedback_id)
        log.info("Feedback %s deleted by %s", feedback.feedback_id, principal.employee_id)
