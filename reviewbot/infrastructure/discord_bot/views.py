"""
Components and Modals
=====================

Buttons and selects carry fixed custom IDs and no callbacks of their own:
the cog's on_interaction listener routes them, so they keep working after a
restart. Modals hand their values to a coroutine supplied by the cog.
"""

from typing import Awaitable, Callable, Optional

import discord

from ...application.review_service import ReviewPrompt
from ...domain.flow import product_value
from ...domain.models import GuildSettings, MAX_RATING, MIN_RATING, ReviewStep

RATING_PREFIX = "review:rating:"
LEAVE_COMMENT_ID = "review:comment"
SELECT_PRODUCT_ID = "review:product"
NO_PRODUCTS_ID = "review:no_products"

COMMENT_MODAL_ID = "review:comment_modal"

CONFIG_EMBED_ID = "review:config_embed"
CONFIG_PRODUCTS_ID = "review:config_products"
CONFIG_ROLES_ID = "review:config_roles"

SELECT_OPTION_LIMIT = 25

ModalHandler = Callable[[discord.Interaction, "discord.ui.Modal"], Awaitable[None]]


def rating_custom_id(rating: int) -> str:
    return f"{RATING_PREFIX}{rating}"


def parse_rating_custom_id(custom_id: str) -> Optional[int]:
    try:
        return int(custom_id[len(RATING_PREFIX):])
    except ValueError:
        return None


# ── Review flow components ─────────────────────────────────────────

def build_prompt_view(prompt: ReviewPrompt) -> Optional[discord.ui.View]:
    """Components for a step, or None when the step has none (COMPLETE)."""
    if prompt.step == ReviewStep.RATING:
        return build_rating_view()
    if prompt.step == ReviewStep.COMMENT:
        return build_comment_view()
    if prompt.step == ReviewStep.PRODUCT:
        return build_product_view(prompt.settings)
    return None


def build_rating_view() -> discord.ui.View:
    view = discord.ui.View(timeout=None)
    for rating in range(MIN_RATING, MAX_RATING + 1):
        view.add_item(discord.ui.Button(
            label=f"{rating} Star{'s' if rating != 1 else ''}",
            style=discord.ButtonStyle.primary if rating == MAX_RATING else discord.ButtonStyle.secondary,
            custom_id=rating_custom_id(rating),
        ))
    return view


def build_comment_view() -> discord.ui.View:
    view = discord.ui.View(timeout=None)
    view.add_item(discord.ui.Button(
        label="Leave Comment",
        style=discord.ButtonStyle.primary,
        emoji="💬",
        custom_id=LEAVE_COMMENT_ID,
    ))
    return view


def build_product_view(settings: GuildSettings) -> discord.ui.View:
    view = discord.ui.View(timeout=None)

    if not settings.has_products:
        view.add_item(discord.ui.Button(
            label="No Products Configured",
            style=discord.ButtonStyle.secondary,
            custom_id=NO_PRODUCTS_ID,
            disabled=True,
        ))
        return view

    options = [
        discord.SelectOption(
            label=product[:100],
            value=product_value(index),
            description=f"Select {product}"[:100],
        )
        for index, product in enumerate(settings.products[:SELECT_OPTION_LIMIT])
    ]
    view.add_item(discord.ui.Select(
        custom_id=SELECT_PRODUCT_ID,
        placeholder="Choose a product/item",
        options=options,
    ))
    return view


def build_admin_view() -> discord.ui.View:
    view = discord.ui.View(timeout=None)
    view.add_item(discord.ui.Button(
        label="Embed Settings", style=discord.ButtonStyle.primary, custom_id=CONFIG_EMBED_ID,
    ))
    view.add_item(discord.ui.Button(
        label="Manage Products", style=discord.ButtonStyle.secondary, custom_id=CONFIG_PRODUCTS_ID,
    ))
    view.add_item(discord.ui.Button(
        label="Admin Roles", style=discord.ButtonStyle.secondary, custom_id=CONFIG_ROLES_ID,
    ))
    return view


# ── Modals ─────────────────────────────────────────────────────────

class _HandlerModal(discord.ui.Modal):
    """Modal that forwards its submission to a handler coroutine."""

    def __init__(self, handler: ModalHandler, **kwargs):
        super().__init__(**kwargs)
        self._handler = handler

    async def on_submit(self, interaction: discord.Interaction) -> None:
        await self._handler(interaction, self)


class CommentModal(_HandlerModal):
    def __init__(self, handler: ModalHandler, min_length: int = 10, max_length: int = 1000):
        super().__init__(handler, title="Leave Your Comment", custom_id=COMMENT_MODAL_ID)
        self.comment = discord.ui.TextInput(
            label="Your detailed comment",
            style=discord.TextStyle.paragraph,
            min_length=min_length,
            max_length=max_length,
            placeholder="Please share your detailed experience...",
            required=True,
        )
        self.add_item(self.comment)


class EmbedConfigModal(_HandlerModal):
    def __init__(self, handler: ModalHandler, settings: GuildSettings):
        super().__init__(handler, title="Configure Embed Settings")
        self.embed_title = discord.ui.TextInput(
            label="Embed Title",
            style=discord.TextStyle.short,
            default=settings.embed_title,
            max_length=256,
            required=True,
        )
        self.embed_description = discord.ui.TextInput(
            label="Embed Description",
            style=discord.TextStyle.paragraph,
            default=settings.embed_description,
            max_length=1000,
            required=True,
        )
        self.embed_color = discord.ui.TextInput(
            label="Embed Color (Hex)",
            style=discord.TextStyle.short,
            default=settings.embed_color,
            placeholder="#3498db",
            max_length=7,
            required=True,
        )
        self.add_item(self.embed_title)
        self.add_item(self.embed_description)
        self.add_item(self.embed_color)


class ProductsConfigModal(_HandlerModal):
    def __init__(self, handler: ModalHandler, settings: GuildSettings):
        super().__init__(handler, title="Configure Products/Items")
        self.products = discord.ui.TextInput(
            label="Products/Items (one per line)",
            style=discord.TextStyle.paragraph,
            default="\n".join(settings.products) or None,
            placeholder="Product 1\nProduct 2\nProduct 3",
            max_length=2000,
            required=True,
        )
        self.add_item(self.products)


class AdminRolesModal(_HandlerModal):
    def __init__(self, handler: ModalHandler, settings: GuildSettings):
        super().__init__(handler, title="Configure Admin Roles")
        self.roles = discord.ui.TextInput(
            label="Role IDs or mentions (one per line)",
            style=discord.TextStyle.paragraph,
            default="\n".join(str(role_id) for role_id in settings.admin_roles) or None,
            placeholder="123456789012345678",
            max_length=1000,
            required=False,
        )
        self.add_item(self.roles)
