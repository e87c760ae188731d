"""
Command Deployment - Register Slash Commands
============================================

Logs in, syncs /reviewmenu, /setreviewchannel and /adminconfig, and exits.
Set DISCORD_DEV_GUILD_ID to sync to a single server instantly instead of
globally.
"""

import sys
import asyncio
import logging

from reviewbot.infrastructure.config import get_settings
from reviewbot.infrastructure.discord_bot import ReviewBot
from reviewbot.infrastructure.persistence import Database

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


async def deploy() -> int:
    settings = get_settings()
    bot = ReviewBot(settings, Database(str(settings.database_file)), sync_on_start=False)
    async with bot:
        await bot.login(settings.discord.token)
        return await bot.sync_commands()


def main():
    if not get_settings().discord.token:
        logger.error("DISCORD_BOT_TOKEN environment variable is required")
        sys.exit(1)

    count = asyncio.run(deploy())
    if not count:
        sys.exit(1)


if __name__ == "__main__":
    main()
