from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Feedback


class FeedbackRepository(Protocol):
    def create(
        self,
        *,
        employee_id: int,
        author_id: int,
        content: str,
        polished_content: Optional[str],
        rating: Optional[int],
        category: Optional[str],
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, feedback_id: int) -> Optional[Feedback]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int, *, include_hidden: bool = False) -> Sequence[Feedback]:
        raise NotImplementedError

    def list_by_author(self, author_id: int, *, include_hidden: bool = False) -> Sequence[Feedback]:
        raise NotImplementedError

    def list_all(self, *, include_hidden: bool = False) -> Sequence[Feedback]:
        raise NotImplementedError

    def set_visible(self, *, feedback_id: int, is_visible: bool) -> bool:
        raise NotImplementedError

    def delete(self, *, feedback_id: int) -> bool:
        raise NotImplementedError
