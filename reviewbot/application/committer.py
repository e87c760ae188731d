"""
Submission Committer - Finalize a Completed Review
===================================================

Order of effects, always:
  1. persist the review       (failure aborts the submission)
  2. announce it in a channel (best effort, failures only logged)
  3. clear the session        (only after 1 succeeded)

Notification retry is intentionally absent: once the review is stored the
announcement is fire-and-forget.
"""

import logging

from ..domain.errors import StorageFailure
from ..domain.flow import ReviewFlow
from ..domain.models import GuildSettings, Review, ReviewSession, ReviewStep
from .sessions import SessionRegistry

logger = logging.getLogger(__name__)


class SubmissionCommitter:
    """
    Args:
        review_store: object with save_review(...) -> Review
        notifier: NotificationProvider, or None to skip announcements
        registry: the SessionRegistry owning the session
        flow: used to roll the session back to PRODUCT if storage fails
    """

    def __init__(self, review_store, notifier, registry: SessionRegistry, flow: ReviewFlow):
        self._store = review_store
        self._notifier = notifier
        self._registry = registry
        self._flow = flow

    async def commit(self, session: ReviewSession, settings: GuildSettings) -> Review:
        """Caller must hold the session's registry lock."""
        if session.step != ReviewStep.COMPLETE:
            raise ValueError(f"Cannot commit a session at step {session.step.value}")

        try:
            review = self._store.save_review(
                user_id=session.user_id,
                user_name=session.user_display_name,
                guild_id=session.guild_id,
                rating=session.rating,
                comment=session.comment,
                product=session.product,
            )
        except StorageFailure:
            self._flow.rollback_product(session)
            raise
        except Exception as e:
            logger.exception(f"Unexpected error saving review for user {session.user_id}: {e}")
            self._flow.rollback_product(session)
            raise StorageFailure() from e

        logger.info(f"Review {review.id} saved: guild {review.guild_id}, user {review.user_id}, {review.rating}/5")

        await self._announce(review, settings)

        self._registry.delete(session.guild_id, session.user_id)
        return review

    async def _announce(self, review: Review, settings: GuildSettings) -> None:
        if self._notifier is None or not settings.review_channel_id:
            return
        try:
            await self._notifier.send_review(settings.review_channel_id, review, settings)
        except Exception as e:
            logger.exception(
                f"Failed to announce review {review.id} in channel {settings.review_channel_id}: {e}"
            )
