"""
Settings Service - Admin Configuration of the Review Form
==========================================================
"""

import re
import logging
from typing import Iterable, List, Optional

from ..domain.errors import StorageFailure, ValidationFailed
from ..domain.models import GuildSettings
from ..domain.permissions import require_admin

logger = logging.getLogger(__name__)

HEX_COLOR_PATTERN = re.compile(r"^#([0-9A-F]{3}){1,2}$", re.IGNORECASE)
_ROLE_ID_PATTERN = re.compile(r"\d{5,}")

MAX_TITLE_LENGTH = 256
MAX_DESCRIPTION_LENGTH = 1000


class SettingsService:
    """Validates admin input and writes it through the settings store."""

    def __init__(self, settings_store, max_products: int = 25):
        self._store = settings_store
        self.max_products = max_products

    def get(self, guild_id: int) -> GuildSettings:
        return self._store.get_settings(guild_id)

    def check_admin(self, guild_id: int, has_admin_permission: bool, member_role_ids: Iterable[int]) -> GuildSettings:
        """Raises PermissionDenied; returns the guild settings otherwise."""
        settings = self.get(guild_id)
        require_admin(has_admin_permission, member_role_ids, settings)
        return settings

    def set_review_channel(self, guild_id: int, channel_id: Optional[int]) -> None:
        self._write(guild_id, review_channel_id=channel_id)
        logger.info(f"Review channel for guild {guild_id} set to {channel_id}")

    def update_embed(self, guild_id: int, title: str, description: str, color: str) -> None:
        title = (title or "").strip()
        description = (description or "").strip()
        color = (color or "").strip()

        if not title or len(title) > MAX_TITLE_LENGTH:
            raise ValidationFailed(f"Embed title must be 1-{MAX_TITLE_LENGTH} characters.")
        if not description or len(description) > MAX_DESCRIPTION_LENGTH:
            raise ValidationFailed(f"Embed description must be 1-{MAX_DESCRIPTION_LENGTH} characters.")
        if not HEX_COLOR_PATTERN.match(color):
            raise ValidationFailed("Invalid hex color format. Please use format like #3498db")

        self._write(guild_id, embed_title=title, embed_description=description, embed_color=color)

    def update_products(self, guild_id: int, text: str) -> List[str]:
        """One product per line; blank lines dropped. Returns the saved list."""
        products = parse_products(text)
        if not products:
            raise ValidationFailed("Please provide at least one product/item.")
        if len(products) > self.max_products:
            raise ValidationFailed(
                f"Maximum {self.max_products} products allowed due to Discord limitations."
            )
        self._write(guild_id, products=products)
        return products

    def update_admin_roles(self, guild_id: int, text: str) -> List[int]:
        """Role IDs or mentions, any separator. Empty input clears the list."""
        roles = parse_role_ids(text)
        self._write(guild_id, admin_roles=roles)
        return roles

    def _write(self, guild_id: int, /, **fields) -> None:
        if not self._store.update_settings(guild_id, **fields):
            raise StorageFailure("Could not save the settings. Please try again later.")


def parse_products(text: str) -> List[str]:
    return [line.strip() for line in (text or "").splitlines() if line.strip()]


def parse_role_ids(text: str) -> List[int]:
    """Unique role IDs in input order, from raw IDs or <@&id> mentions."""
    seen = []
    for match in _ROLE_ID_PATTERN.findall(text or ""):
        role_id = int(match)
        if role_id not in seen:
            seen.append(role_id)
    return seen
