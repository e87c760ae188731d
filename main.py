"""
Review Menu Bot - Entry Point
=============================

Run this to start the Discord bot and its liveness endpoint:
    python main.py

Then check http://127.0.0.1:5000/ (or WEB_PORT) to confirm it is up.

To register slash commands without starting the bot:
    python deploy_commands.py
"""

import sys
import asyncio
import logging

import uvicorn

from reviewbot.infrastructure.config import get_settings
from reviewbot.infrastructure.discord_bot import ReviewBot
from reviewbot.infrastructure.persistence import init_database
from reviewbot.web import create_app

logger = logging.getLogger(__name__)


async def run(settings) -> None:
    """Run the bot and the web server side by side until either stops."""
    db = init_database(str(settings.database_file))
    bot = ReviewBot(settings, db)

    async with bot:
        jobs = [bot.start(settings.discord.token)]
        if settings.web.enabled:
            server = uvicorn.Server(uvicorn.Config(
                create_app(bot),
                host=settings.web.host,
                port=settings.web.port,
                log_level="info",
            ))
            jobs.append(server.serve())
            logger.info(f"HTTP server running on port {settings.web.port}")
        await asyncio.gather(*jobs)


def main():
    """Start the bot."""
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format='%(asctime)s - %(levelname)s - %(name)s - %(message)s'
    )

    for issue in settings.validate():
        logger.warning(issue)

    if not settings.discord.token:
        logger.error("DISCORD_BOT_TOKEN environment variable is required")
        sys.exit(1)

    print("\n" + "=" * 50)
    print("   Review Menu Bot")
    print("=" * 50 + "\n")

    try:
        asyncio.run(run(settings))
    except KeyboardInterrupt:
        print("\nStopped")


if __name__ == "__main__":
    main()
