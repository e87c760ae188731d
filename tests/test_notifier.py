"""Tests for the Discord channel notifier, with a mocked client."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from reviewbot.domain.errors import NotificationFailure
from reviewbot.domain.models import GuildSettings, Review
from reviewbot.infrastructure.discord_bot.notifier import DiscordChannelNotifier

from conftest import ALICE, CHANNEL, GUILD

REVIEW = Review(id=7, user_id=ALICE, user_name="Alice", guild_id=GUILD,
                rating=5, comment="Great service, very happy", product="Banner")
SETTINGS = GuildSettings(guild_id=GUILD, review_channel_id=CHANNEL)


def _response(status):
    return MagicMock(status=status, reason="error")


def _text_channel():
    channel = MagicMock(spec=discord.TextChannel)
    channel.send = AsyncMock()
    return channel


class TestDiscordChannelNotifier:
    def test_sends_embed_to_cached_channel(self):
        channel = _text_channel()
        client = MagicMock()
        client.get_channel.return_value = channel

        asyncio.run(DiscordChannelNotifier(client).send_review(CHANNEL, REVIEW, SETTINGS))

        client.get_channel.assert_called_once_with(CHANNEL)
        embed = channel.send.await_args.kwargs["embed"]
        assert embed.footer.text == "Review ID: 7"

    def test_fetches_uncached_channel(self):
        channel = _text_channel()
        client = MagicMock()
        client.get_channel.return_value = None
        client.fetch_channel = AsyncMock(return_value=channel)

        asyncio.run(DiscordChannelNotifier(client).send_review(CHANNEL, REVIEW, SETTINGS))

        client.fetch_channel.assert_awaited_once_with(CHANNEL)
        channel.send.assert_awaited_once()

    def test_missing_channel_raises_notification_failure(self):
        client = MagicMock()
        client.get_channel.return_value = None
        client.fetch_channel = AsyncMock(side_effect=discord.NotFound(_response(404), "Unknown Channel"))

        with pytest.raises(NotificationFailure):
            asyncio.run(DiscordChannelNotifier(client).send_review(CHANNEL, REVIEW, SETTINGS))

    def test_non_messageable_channel(self):
        client = MagicMock()
        client.get_channel.return_value = MagicMock(spec=discord.CategoryChannel)

        with pytest.raises(NotificationFailure):
            asyncio.run(DiscordChannelNotifier(client).send_review(CHANNEL, REVIEW, SETTINGS))

    def test_send_error_wrapped(self):
        channel = _text_channel()
        channel.send.side_effect = discord.Forbidden(_response(403), "Missing Permissions")
        client = MagicMock()
        client.get_channel.return_value = channel

        with pytest.raises(NotificationFailure):
            asyncio.run(DiscordChannelNotifier(client).send_review(CHANNEL, REVIEW, SETTINGS))
