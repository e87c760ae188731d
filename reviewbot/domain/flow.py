"""
Review Flow - Linear State Machine
==================================

RATING -> COMMENT -> PRODUCT -> COMPLETE

ARCHITECTURAL DECISION:
- Each session carries an explicit `step`; an input is accepted only when it
  matches that step. The step is never inferred from which fields are set.
- Pure logic: no I/O, no Discord, no storage. The application layer holds
  the session lock and performs the side effects.
"""

from typing import Sequence

from .errors import CatalogEmpty, OutOfOrderStep, SessionExpired, ValidationFailed
from .models import MAX_RATING, MIN_RATING, ReviewSession, ReviewStep

PRODUCT_VALUE_PREFIX = "product_"


class ReviewFlow:
    """
    Transition rules for a single review session.

    Usage:
        flow = ReviewFlow(comment_min_length=10, comment_max_length=1000)
        flow.choose_rating(session, 5)            # -> ReviewStep.COMMENT
        flow.submit_comment(session, "Great!")    # -> ReviewStep.PRODUCT
        flow.select_product(session, catalog, 0)  # -> ReviewStep.COMPLETE
    """

    def __init__(self, comment_min_length: int = 10, comment_max_length: int = 1000):
        self.comment_min_length = max(comment_min_length, 1)
        self.comment_max_length = comment_max_length

    # ── Transitions ────────────────────────────────────────────────

    def choose_rating(self, session: ReviewSession, rating: int) -> ReviewStep:
        """
        Accepted at any step: picking a rating (re)starts the flow.
        Later fields are cleared so a restarted review never inherits them.
        """
        if not isinstance(rating, int) or not MIN_RATING <= rating <= MAX_RATING:
            raise ValidationFailed(f"Rating must be between {MIN_RATING} and {MAX_RATING}.")

        session.rating = rating
        session.comment = None
        session.product = None
        session.step = ReviewStep.COMMENT
        session.touch()
        return session.step

    def submit_comment(self, session: ReviewSession, text: str) -> ReviewStep:
        self.require_step(session, ReviewStep.COMMENT)
        comment = self.validate_comment(text)

        session.comment = comment
        session.step = ReviewStep.PRODUCT
        session.touch()
        return session.step

    def select_product(self, session: ReviewSession, catalog: Sequence[str], index: int) -> ReviewStep:
        """Validation happens before any mutation so a bad index leaves the session untouched."""
        self.require_step(session, ReviewStep.PRODUCT)

        if not catalog:
            raise CatalogEmpty()
        if not isinstance(index, int) or not 0 <= index < len(catalog):
            raise ValidationFailed("That product is no longer available. Please pick another one.")

        session.product = catalog[index]
        session.step = ReviewStep.COMPLETE
        session.touch()
        return session.step

    def rollback_product(self, session: ReviewSession) -> None:
        """Return a session to PRODUCT after a failed commit."""
        session.product = None
        session.step = ReviewStep.PRODUCT
        session.touch()

    # ── Guards ─────────────────────────────────────────────────────

    def require_step(self, session: ReviewSession, step: ReviewStep) -> None:
        """
        Raise SessionExpired when a field the step depends on is missing, and
        OutOfOrderStep when the session is elsewhere in the flow.

        Missing fields are checked first: a session opened by /reviewmenu but
        never rated has nothing to continue from.
        """
        required = {
            ReviewStep.COMMENT: ("rating",),
            ReviewStep.PRODUCT: ("rating", "comment"),
        }.get(step, ())
        if any(getattr(session, name) is None for name in required):
            raise SessionExpired()

        if session.step != step:
            raise OutOfOrderStep()

    def validate_comment(self, text: str) -> str:
        """Length rules apply to the stripped text; the text is returned as typed."""
        comment = (text or "").strip()
        if len(comment) < self.comment_min_length:
            raise ValidationFailed(
                f"Your comment must be at least {self.comment_min_length} characters long."
            )
        if len(comment) > self.comment_max_length:
            raise ValidationFailed(
                f"Your comment must be at most {self.comment_max_length} characters long."
            )
        return text


def product_value(index: int) -> str:
    """Select-menu value for a catalog entry."""
    return f"{PRODUCT_VALUE_PREFIX}{index}"


def parse_product_value(value: str) -> int:
    """Inverse of product_value(). Raises ValidationFailed on anything else."""
    if not value or not value.startswith(PRODUCT_VALUE_PREFIX):
        raise ValidationFailed("Unrecognised product selection.")
    try:
        return int(value[len(PRODUCT_VALUE_PREFIX):])
    except ValueError:
        raise ValidationFailed("Unrecognised product selection.")
