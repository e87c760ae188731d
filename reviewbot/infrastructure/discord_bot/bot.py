"""
Review Bot - discord.py Client and Composition Root
====================================================

Wires the registry, flow, stores, committer and services together and
registers the ReviewCog. Nothing here holds review state of its own.
"""

import logging
from typing import Optional

import discord
from discord.ext import commands

from ...application.committer import SubmissionCommitter
from ...application.review_service import ReviewService
from ...application.sessions import SessionRegistry
from ...application.settings_service import SettingsService
from ...domain.flow import ReviewFlow
from ..config import Settings
from ..persistence import Database
from .cog import ReviewCog
from .notifier import DiscordChannelNotifier

logger = logging.getLogger(__name__)


class ReviewBot(commands.Bot):
    """
    Usage:
        bot = ReviewBot(get_settings(), init_database())
        async with bot:
            await bot.start(token)
    """

    def __init__(self, settings: Settings, database: Database, sync_on_start: Optional[bool] = None):
        intents = discord.Intents.default()
        super().__init__(command_prefix=commands.when_mentioned, intents=intents)

        self.settings = settings
        self.database = database
        self._sync_on_start = (
            settings.discord.sync_commands_on_start if sync_on_start is None else sync_on_start
        )

        self.registry = SessionRegistry()
        self.flow = ReviewFlow(
            comment_min_length=settings.flow.comment_min_length,
            comment_max_length=settings.flow.comment_max_length,
        )
        committer = SubmissionCommitter(database, DiscordChannelNotifier(self), self.registry, self.flow)
        self.review_service = ReviewService(self.registry, database, committer, self.flow)
        self.settings_service = SettingsService(database, max_products=settings.flow.max_products)

    async def setup_hook(self) -> None:
        await self.add_cog(ReviewCog(self, self.review_service, self.settings_service, self.settings.flow))
        if self._sync_on_start:
            await self.sync_commands()

    async def sync_commands(self) -> int:
        """Register slash commands, scoped to the dev guild when one is configured."""
        guild_id = self.settings.discord.dev_guild_id
        try:
            logger.info("Started refreshing application (/) commands.")
            if guild_id:
                guild = discord.Object(id=guild_id)
                self.tree.copy_global_to(guild=guild)
                synced = await self.tree.sync(guild=guild)
            else:
                synced = await self.tree.sync()
            logger.info(f"Successfully reloaded {len(synced)} application (/) commands.")
            return len(synced)
        except discord.HTTPException as e:
            logger.error(f"Error registering slash commands: {e}")
            return 0

    async def on_ready(self) -> None:
        logger.info(f"Bot is ready! Logged in as {self.user} ({len(self.guilds)} guilds)")
