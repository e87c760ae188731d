"""Review Cog - Slash commands, component routing and the idle-session reaper."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Awaitable, Callable, List, Tuple

import discord
from discord import app_commands
from discord.ext import commands, tasks

from ...application.review_service import ReviewPrompt, ReviewService
from ...application.settings_service import SettingsService
from ...domain.errors import ReviewBotError, ValidationFailed
from ...domain.flow import parse_product_value
from ..config import ReviewFlowSettings
from .embeds import build_admin_embed, build_prompt_embed
from .views import (
    CONFIG_EMBED_ID,
    CONFIG_PRODUCTS_ID,
    CONFIG_ROLES_ID,
    LEAVE_COMMENT_ID,
    RATING_PREFIX,
    SELECT_PRODUCT_ID,
    AdminRolesModal,
    CommentModal,
    EmbedConfigModal,
    ProductsConfigModal,
    build_admin_view,
    build_prompt_view,
    parse_rating_custom_id,
)

logger = logging.getLogger(__name__)

_MSG_GENERIC_ERROR = "An error occurred while processing your request."
_MSG_GUILD_ONLY = "This command can only be used in a server."
_CUSTOM_ID_NAMESPACE = "review:"


def _member_permissions(interaction: discord.Interaction) -> Tuple[bool, List[int]]:
    """(has Administrator or Manage Guild, role ids) for the acting member."""
    member = interaction.user
    if not isinstance(member, discord.Member):
        return False, []
    perms = member.guild_permissions
    return perms.administrator or perms.manage_guild, [role.id for role in member.roles]


class ReviewCog(commands.Cog):
    """Customer review menu and its admin configuration."""

    def __init__(
        self,
        bot: commands.Bot,
        review_service: ReviewService,
        settings_service: SettingsService,
        flow_settings: ReviewFlowSettings,
    ) -> None:
        self.bot = bot
        self.reviews = review_service
        self.guild_settings = settings_service
        self.flow_settings = flow_settings

    async def cog_load(self) -> None:
        if self.flow_settings.session_idle_timeout > 0:
            self.reap_sessions.change_interval(seconds=self.flow_settings.reaper_interval)
            self.reap_sessions.start()
        logger.info("Review cog loaded")

    async def cog_unload(self) -> None:
        self.reap_sessions.cancel()

    @tasks.loop(seconds=300)
    async def reap_sessions(self) -> None:
        self.reviews.registry.reap_idle(timedelta(seconds=self.flow_settings.session_idle_timeout))

    # ── Responses ──────────────────────────────────────────────────

    async def _show_prompt(self, interaction: discord.Interaction, prompt: ReviewPrompt, *, new_message: bool = False) -> None:
        embed = build_prompt_embed(prompt, self.flow_settings.comment_preview_length)
        view = build_prompt_view(prompt)
        if new_message:
            await interaction.response.send_message(embed=embed, view=view, ephemeral=True)
        else:
            await interaction.response.edit_message(embed=embed, view=view)

    async def _send_error(self, interaction: discord.Interaction, error: Exception) -> None:
        """Every failure ends in a visible ephemeral reply, never a dropped interaction."""
        if isinstance(error, ReviewBotError):
            logger.info(f"{error.kind} for user {interaction.user.id}: {error.message}")
            message = error.message
        else:
            logger.exception(f"Error handling interaction: {error}", exc_info=error)
            message = _MSG_GENERIC_ERROR

        try:
            if interaction.response.is_done():
                await interaction.followup.send(message, ephemeral=True)
            else:
                await interaction.response.send_message(message, ephemeral=True)
        except discord.HTTPException as e:
            logger.warning(f"Could not deliver error message to user {interaction.user.id}: {e}")

    async def _guarded(self, interaction: discord.Interaction, handler: Callable[[], Awaitable[None]]) -> None:
        try:
            await handler()
        except Exception as e:
            await self._send_error(interaction, e)

    def _require_admin(self, interaction: discord.Interaction):
        has_admin, role_ids = _member_permissions(interaction)
        return self.guild_settings.check_admin(interaction.guild.id, has_admin, role_ids)

    async def cog_app_command_error(self, interaction: discord.Interaction, error: app_commands.AppCommandError) -> None:
        if isinstance(error, app_commands.NoPrivateMessage):
            await self._send_error(interaction, ReviewBotError(_MSG_GUILD_ONLY))
            return
        await self._send_error(interaction, getattr(error, "original", error))

    # ── Slash commands ─────────────────────────────────────────────

    @app_commands.command(name="reviewmenu", description="Opens the review menu for customers to leave reviews")
    @app_commands.guild_only()
    async def review_menu(self, interaction: discord.Interaction) -> None:
        user = interaction.user
        prompt = await self.reviews.start_review(interaction.guild.id, user.id, user.display_name)
        embed = build_prompt_embed(prompt, self.flow_settings.comment_preview_length)
        await interaction.response.send_message(embed=embed, view=build_prompt_view(prompt))

    @app_commands.command(name="setreviewchannel", description="Set the channel where reviews will be sent (Admin only)")
    @app_commands.describe(channel="The channel to send reviews to")
    @app_commands.guild_only()
    async def set_review_channel(self, interaction: discord.Interaction, channel: discord.TextChannel) -> None:
        self._require_admin(interaction)
        self.guild_settings.set_review_channel(interaction.guild.id, channel.id)
        await interaction.response.send_message(f"Review channel has been set to {channel.mention}", ephemeral=True)

    @app_commands.command(name="adminconfig", description="Configure the review system (Admin only)")
    @app_commands.guild_only()
    async def admin_config(self, interaction: discord.Interaction) -> None:
        settings = self._require_admin(interaction)
        await interaction.response.send_message(
            embed=build_admin_embed(settings), view=build_admin_view(), ephemeral=True
        )

    # ── Component routing ──────────────────────────────────────────

    @commands.Cog.listener()
    async def on_interaction(self, interaction: discord.Interaction) -> None:
        """Route review buttons and selects by custom ID."""
        if interaction.type != discord.InteractionType.component:
            return
        custom_id = (interaction.data or {}).get("custom_id", "")
        if not custom_id.startswith(_CUSTOM_ID_NAMESPACE) or interaction.guild is None:
            return

        if custom_id.startswith(RATING_PREFIX):
            await self._guarded(interaction, lambda: self._on_rating(interaction, custom_id))
        elif custom_id == LEAVE_COMMENT_ID:
            await self._guarded(interaction, lambda: self._on_leave_comment(interaction))
        elif custom_id == SELECT_PRODUCT_ID:
            await self._guarded(interaction, lambda: self._on_product(interaction))
        elif custom_id == CONFIG_EMBED_ID:
            await self._guarded(interaction, lambda: self._on_config(interaction, EmbedConfigModal, self._on_embed_submit))
        elif custom_id == CONFIG_PRODUCTS_ID:
            await self._guarded(interaction, lambda: self._on_config(interaction, ProductsConfigModal, self._on_products_submit))
        elif custom_id == CONFIG_ROLES_ID:
            await self._guarded(interaction, lambda: self._on_config(interaction, AdminRolesModal, self._on_roles_submit))

    async def _on_rating(self, interaction: discord.Interaction, custom_id: str) -> None:
        rating = parse_rating_custom_id(custom_id)
        if rating is None:
            raise ValidationFailed("Unrecognised rating.")

        user = interaction.user
        prompt = await self.reviews.choose_rating(interaction.guild.id, user.id, user.display_name, rating)

        # The public menu is shared; each user continues in their own ephemeral message.
        from_public_menu = interaction.message is None or not interaction.message.flags.ephemeral
        await self._show_prompt(interaction, prompt, new_message=from_public_menu)

    async def _on_leave_comment(self, interaction: discord.Interaction) -> None:
        await self.reviews.open_comment(interaction.guild.id, interaction.user.id)
        await interaction.response.send_modal(CommentModal(
            self._on_comment_submit,
            min_length=self.flow_settings.comment_min_length,
            max_length=self.flow_settings.comment_max_length,
        ))

    async def _on_comment_submit(self, interaction: discord.Interaction, modal: CommentModal) -> None:
        async def handle():
            prompt = await self.reviews.submit_comment(interaction.guild.id, interaction.user.id, modal.comment.value)
            await self._show_prompt(interaction, prompt)

        await self._guarded(interaction, handle)

    async def _on_product(self, interaction: discord.Interaction) -> None:
        values = (interaction.data or {}).get("values") or [""]
        index = parse_product_value(values[0])
        prompt = await self.reviews.select_product(interaction.guild.id, interaction.user.id, index)
        await self._show_prompt(interaction, prompt)

    # ── Admin configuration ────────────────────────────────────────

    async def _on_config(self, interaction: discord.Interaction, modal_cls, handler) -> None:
        settings = self._require_admin(interaction)
        await interaction.response.send_modal(modal_cls(handler, settings))

    async def _on_embed_submit(self, interaction: discord.Interaction, modal: EmbedConfigModal) -> None:
        async def handle():
            self._require_admin(interaction)
            self.guild_settings.update_embed(
                interaction.guild.id,
                modal.embed_title.value,
                modal.embed_description.value,
                modal.embed_color.value,
            )
            await interaction.response.send_message("Embed settings have been updated successfully!", ephemeral=True)

        await self._guarded(interaction, handle)

    async def _on_products_submit(self, interaction: discord.Interaction, modal: ProductsConfigModal) -> None:
        async def handle():
            self._require_admin(interaction)
            products = self.guild_settings.update_products(interaction.guild.id, modal.products.value)
            await interaction.response.send_message(
                f"Successfully updated product list with {len(products)} items!", ephemeral=True
            )

        await self._guarded(interaction, handle)

    async def _on_roles_submit(self, interaction: discord.Interaction, modal: AdminRolesModal) -> None:
        async def handle():
            self._require_admin(interaction)
            roles = self.guild_settings.update_admin_roles(interaction.guild.id, modal.roles.value)
            if roles:
                mentions = ", ".join(f"<@&{role_id}>" for role_id in roles)
                message = f"Admin roles updated: {mentions}"
            else:
                message = "Admin roles cleared. Only members with Manage Server can configure reviews."
            await interaction.response.send_message(message, ephemeral=True)

        await self._guarded(interaction, handle)
