"""
Rating / comment rules shared by every path that writes feedback.

Both ``FeedbackService.give_feedback`` and the complaint reopen flow call
these before touching the database, so the two entry points cannot drift
apart.
"""

from __future__ import annotations

from typing import Any

from core.constants import MAX_FEEDBACK_COMMENT_LENGTH, MAX_RATING, MIN_RATING
from core.domain.exceptions import DomainError


def validate_rating(rating: Any) -> int:
    """
    Return ``rating`` as an int, or raise ``DomainError``.

    ``bool`` is rejected explicitly since it is an ``int`` subclass.
    """
    if rating is None or rating == "":
        raise DomainError("Rating is required.")
    if isinstance(rating, bool):
        raise DomainError("Rating must be an integer.")
    try:
        value = int(rating)
    except (TypeError, ValueError):
        raise DomainError("Rating must be an integer.")
    if isinstance(rating, float) and rating != value:
        raise DomainError("Rating must be an integer.")
    if not MIN_RATING <= value <= MAX_RATING:
        raise DomainError(f"Rating must be between {MIN_RATING} and {MAX_RATING}.")
    return value


def validate_comment(comment: str | None) -> str | None:
    """Blank comments are stored as ``None``; long ones are rejected."""
    if comment is None:
        return None
    comment = str(comment).strip()
    if not comment:
        return None
    if len(comment) > MAX_FEEDBACK_COMMENT_LENGTH:
        raise DomainError("Comment too long")
    return comment
