"""
Notification Provider - Review Announcements
============================================

Provides a unified interface for announcing a saved review in a channel.
The committer only knows about NotificationProvider, so the Discord
implementation can be swapped (or replaced with a fake in tests).

USAGE:
    notifier = DiscordChannelNotifier(bot)
    await notifier.send_review(channel_id, review, settings)
"""

import logging
from abc import ABC, abstractmethod

import discord

from ...domain.errors import NotificationFailure
from ...domain.models import GuildSettings, Review
from .embeds import build_review_announcement

logger = logging.getLogger(__name__)


class NotificationProvider(ABC):
    """
    Abstract base class for review announcement backends.
    Implementations raise NotificationFailure when delivery fails.
    """

    @abstractmethod
    async def send_review(self, channel_id: int, review: Review, settings: GuildSettings) -> None:
        """Announce a saved review in the given channel."""
        ...


class DiscordChannelNotifier(NotificationProvider):
    """Posts an embed in a guild text channel via the bot client."""

    def __init__(self, client: discord.Client):
        self._client = client

    async def _resolve_channel(self, channel_id: int):
        channel = self._client.get_channel(channel_id)
        if channel is not None:
            return channel
        try:
            return await self._client.fetch_channel(channel_id)
        except (discord.NotFound, discord.Forbidden) as e:
            raise NotificationFailure(f"Review channel {channel_id} is not accessible: {e}") from e

    async def send_review(self, channel_id: int, review: Review, settings: GuildSettings) -> None:
        channel = await self._resolve_channel(channel_id)
        if not isinstance(channel, discord.abc.Messageable):
            raise NotificationFailure(f"Review channel {channel_id} cannot receive messages")

        try:
            await channel.send(embed=build_review_announcement(review, settings))
        except discord.HTTPException as e:
            raise NotificationFailure(f"Could not post review {review.id} in channel {channel_id}: {e}") from e

        logger.info(f"Review {review.id} announced in channel {channel_id}")
