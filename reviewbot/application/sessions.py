"""
Session Registry - In-Flight Review Sessions
=============================================

ARCHITECTURAL DECISION:
- Keyed by (guild_id, user_id): one review per user per guild, and the same
  user in two guilds has two independent sessions.
- Constructor-injected, never a module global.
- Per-key asyncio.Lock. Handlers suspend between reading and writing a
  session (interaction responses, channel delivery), so two interactions
  from the same user are serialized by holding the key's lock for the whole
  step. Different keys never contend.
- Nothing is persisted: a restart drops every in-flight session.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import AsyncIterator, Dict, Optional

from ..domain.errors import SessionExpired
from ..domain.models import ReviewSession, SessionKey, utcnow

logger = logging.getLogger(__name__)


@dataclass
class _KeyLock:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    users: int = 0


class SessionRegistry:
    """
    Usage:
        registry = SessionRegistry()
        async with registry.lock(guild_id, user_id):
            session = registry.get_or_create(guild_id, user_id, "Sam")
            ...
    """

    def __init__(self):
        self._sessions: Dict[SessionKey, ReviewSession] = {}
        self._locks: Dict[SessionKey, _KeyLock] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, key: SessionKey) -> bool:
        return key in self._sessions

    # ── Lookup ─────────────────────────────────────────────────────

    def get_or_create(self, guild_id: int, user_id: int, display_name: str) -> ReviewSession:
        """Existing session for the key, or a new empty one. Display name is captured only on creation."""
        key = (guild_id, user_id)
        session = self._sessions.get(key)
        if session is None:
            session = ReviewSession(guild_id=guild_id, user_id=user_id, user_display_name=display_name)
            self._sessions[key] = session
            logger.debug(f"Session created for user {user_id} in guild {guild_id}")
        return session

    def get(self, guild_id: int, user_id: int) -> ReviewSession:
        """Lookup without creation. Raises SessionExpired when absent."""
        session = self._sessions.get((guild_id, user_id))
        if session is None:
            raise SessionExpired()
        return session

    def delete(self, guild_id: int, user_id: int) -> None:
        """Idempotent."""
        if self._sessions.pop((guild_id, user_id), None) is not None:
            logger.debug(f"Session cleared for user {user_id} in guild {guild_id}")

    # ── Concurrency ────────────────────────────────────────────────

    @asynccontextmanager
    async def lock(self, guild_id: int, user_id: int) -> AsyncIterator[None]:
        """
        Exclusive access to one key. Lock entries are reference counted and
        dropped once nobody holds or waits on them.
        """
        key = (guild_id, user_id)
        entry = self._locks.get(key)
        if entry is None:
            entry = self._locks[key] = _KeyLock()
        entry.users += 1
        try:
            async with entry.lock:
                yield
        finally:
            entry.users -= 1
            if entry.users == 0:
                self._locks.pop(key, None)

    # ── Housekeeping ───────────────────────────────────────────────

    def reap_idle(self, max_idle: timedelta, now: Optional[datetime] = None) -> int:
        """
        Drop sessions not touched within max_idle. Sessions whose key is
        currently locked are skipped, they are mid-step.
        """
        now = now or utcnow()
        stale = [
            key for key, session in self._sessions.items()
            if now - session.updated_at > max_idle and key not in self._locks
        ]
        for key in stale:
            del self._sessions[key]

        if stale:
            logger.info(f"Reaped {len(stale)} idle review session(s)")
        return len(stale)
