"""
FastAPI Web Application - Liveness Endpoint
===========================================

Served by uvicorn inside the bot's event loop so uptime monitors can ping
the process. Exposes no review data.
"""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from .. import __version__

logger = logging.getLogger(__name__)


class HealthStatus(BaseModel):
    status: str
    version: str
    discord_ready: bool
    guilds: int
    active_sessions: int


def create_app(bot=None) -> FastAPI:
    """
    Build the web app. `bot` is the running ReviewBot, or None when the web
    server runs on its own (everything then reports as not ready).
    """
    app = FastAPI(title="Review Menu Bot", description="Discord review collection bot", version=__version__)

    @app.get("/", response_class=PlainTextResponse)
    async def index():
        return "Bot is running!"

    @app.get("/health", response_model=HealthStatus)
    async def health():
        ready = bool(bot is not None and bot.is_ready())
        return HealthStatus(
            status="ok" if ready else "starting",
            version=__version__,
            discord_ready=ready,
            guilds=len(bot.guilds) if ready else 0,
            active_sessions=len(bot.registry) if bot is not None else 0,
        )

    return app
