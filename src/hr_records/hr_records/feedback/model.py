from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Feedback:
    """Domain entity: peer feedback about one employee.

    Content is immutable after creation; only is_visible changes (moderation).
    """

    feedback_id: int
    employee_id: int
    author_id: int
    content: str
    author_name: Optional[str] = None
    polished_content: Optional[str] = None
    is_polished: bool = False
    rating: Optional[int] = None
    category: Optional[str] = None
    is_visible: bool = True
    created_at: Optional[datetime] = None

    @property
    def display_content(self) -> str:
        if self.is_polished and self.polished_content:
            return self.polished_content
        return self.content
