"""
Domain Models - Sessions, Guild Settings and Reviews
=====================================================

Plain dataclasses with no Discord or database dependencies.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Tuple

DEFAULT_EMBED_COLOR = "#3498db"
DEFAULT_EMBED_TITLE = "Review System"
DEFAULT_EMBED_DESCRIPTION = "Please complete all steps to submit your review."

MIN_RATING = 1
MAX_RATING = 5

SessionKey = Tuple[int, int]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ReviewStep(Enum):
    """Steps of the review flow, in order."""
    RATING = "rating"
    COMMENT = "comment"
    PRODUCT = "product"
    COMPLETE = "complete"


@dataclass
class ReviewSession:
    """
    One user's in-progress review in one guild.

    Owned by the SessionRegistry. Everything else works on snapshots.
    """
    guild_id: int
    user_id: int
    user_display_name: str
    step: ReviewStep = ReviewStep.RATING
    rating: Optional[int] = None
    comment: Optional[str] = None
    product: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def touch(self) -> None:
        self.updated_at = utcnow()

    def snapshot(self) -> "ReviewSession":
        """Detached copy safe to hand to presentation code."""
        return replace(self)


@dataclass
class GuildSettings:
    """Per-guild review form configuration."""
    guild_id: int
    embed_color: str = DEFAULT_EMBED_COLOR
    embed_title: str = DEFAULT_EMBED_TITLE
    embed_description: str = DEFAULT_EMBED_DESCRIPTION
    review_channel_id: Optional[int] = None
    products: List[str] = field(default_factory=list)
    admin_roles: List[int] = field(default_factory=list)

    @property
    def has_products(self) -> bool:
        return len(self.products) > 0

    @property
    def color_value(self) -> int:
        """Embed color as an integer, falling back to the default on bad data."""
        try:
            return parse_hex_color(self.embed_color)
        except ValueError:
            return parse_hex_color(DEFAULT_EMBED_COLOR)


@dataclass(frozen=True)
class Review:
    """A completed, persisted review."""
    id: int
    user_id: int
    user_name: str
    guild_id: int
    rating: int
    comment: str
    product: str
    created_at: str = ""

    @property
    def stars(self) -> str:
        return star_bar(self.rating)


def parse_hex_color(value: str) -> int:
    """Convert '#rgb' or '#rrggbb' into an integer color."""
    digits = value.strip().lstrip("#")
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    if len(digits) != 6:
        raise ValueError(f"Invalid hex color: {value!r}")
    return int(digits, 16)


def star_bar(rating: int) -> str:
    """'★★★☆☆' for a rating of 3."""
    return "★" * rating + "☆" * (MAX_RATING - rating)


def pluralize_stars(rating: int) -> str:
    return f"{rating} star{'s' if rating != 1 else ''}"


def preview(text: str, limit: int = 100) -> str:
    """Truncate text for display only. Stored values are never truncated."""
    if len(text) > limit:
        return text[:limit] + "..."
    return text
