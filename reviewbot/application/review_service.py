"""
Review Service - Use Cases for the Review Flow
===============================================

One method per inbound event. Each runs under the (guild, user) lock, asks
the state machine for the transition and returns a ReviewPrompt describing
what to render next. Errors from the domain (SessionExpired,
ValidationFailed, ...) propagate to the presentation layer unchanged.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..domain.flow import ReviewFlow
from ..domain.models import GuildSettings, Review, ReviewSession, ReviewStep
from .committer import SubmissionCommitter
from .sessions import SessionRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReviewPrompt:
    """What the presentation layer should show after an event."""
    step: ReviewStep
    settings: GuildSettings
    session: Optional[ReviewSession] = None
    review: Optional[Review] = None


class ReviewService:
    """
    Usage:
        service = ReviewService(registry, db, committer, flow)
        prompt = await service.choose_rating(guild_id, user_id, "Sam", 5)
        prompt = await service.submit_comment(guild_id, user_id, "Great service, very happy")
        prompt = await service.select_product(guild_id, user_id, 0)
    """

    def __init__(self, registry: SessionRegistry, settings_store, committer: SubmissionCommitter, flow: ReviewFlow):
        self.registry = registry
        self.flow = flow
        self._settings_store = settings_store
        self._committer = committer

    def _settings(self, guild_id: int) -> GuildSettings:
        return self._settings_store.get_settings(guild_id)

    async def start_review(self, guild_id: int, user_id: int, display_name: str) -> ReviewPrompt:
        """An existing session is reused as-is; the next rating choice overwrites it."""
        async with self.registry.lock(guild_id, user_id):
            session = self.registry.get_or_create(guild_id, user_id, display_name)
            session.touch()
        return ReviewPrompt(step=ReviewStep.RATING, settings=self._settings(guild_id))

    async def choose_rating(self, guild_id: int, user_id: int, display_name: str, rating: int) -> ReviewPrompt:
        async with self.registry.lock(guild_id, user_id):
            session = self.registry.get_or_create(guild_id, user_id, display_name)
            step = self.flow.choose_rating(session, rating)
            snapshot = session.snapshot()
        logger.debug(f"User {user_id} in guild {guild_id} rated {rating}")
        return ReviewPrompt(step=step, settings=self._settings(guild_id), session=snapshot)

    async def open_comment(self, guild_id: int, user_id: int) -> ReviewPrompt:
        """Checks the session is waiting for a comment before the comment form is shown."""
        async with self.registry.lock(guild_id, user_id):
            session = self.registry.get(guild_id, user_id)
            self.flow.require_step(session, ReviewStep.COMMENT)
            snapshot = session.snapshot()
        return ReviewPrompt(step=ReviewStep.COMMENT, settings=self._settings(guild_id), session=snapshot)

    async def submit_comment(self, guild_id: int, user_id: int, text: str) -> ReviewPrompt:
        async with self.registry.lock(guild_id, user_id):
            session = self.registry.get(guild_id, user_id)
            step = self.flow.submit_comment(session, text)
            snapshot = session.snapshot()
        return ReviewPrompt(step=step, settings=self._settings(guild_id), session=snapshot)

    async def select_product(self, guild_id: int, user_id: int, index: int) -> ReviewPrompt:
        """Final step: sets the product and commits. The session is gone afterwards."""
        async with self.registry.lock(guild_id, user_id):
            session = self.registry.get(guild_id, user_id)
            settings = self._settings(guild_id)
            step = self.flow.select_product(session, settings.products, index)
            snapshot = session.snapshot()
            review = await self._committer.commit(session, settings)
        return ReviewPrompt(step=step, settings=settings, session=snapshot, review=review)
