"""
Core constants — **Single Source of Truth** for project-wide magic numbers.

Any business rule that references a numeric constant should import it from
here instead of hardcoding.  This avoids drift between apps that use the
same value (e.g. feedback creation and complaint reopening both validate
ratings).
"""

# ── Feedback ────────────────────────────────────────────────────────
MIN_RATING: int = 1
MAX_RATING: int = 5
MAX_FEEDBACK_COMMENT_LENGTH: int = 500

# ── Pagination ──────────────────────────────────────────────────────
DEFAULT_PAGE: int = 1
DEFAULT_PAGE_SIZE: int = 10
MAX_PAGE_SIZE: int = 100
