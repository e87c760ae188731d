"""Embed builders for the review flow, admin panel and review announcements."""

import discord

from ...application.review_service import ReviewPrompt
from ...domain.models import (
    GuildSettings,
    Review,
    ReviewStep,
    parse_hex_color,
    pluralize_stars,
    preview,
)

COMPLETE_COLOR = "#27ae60"
ADMIN_COLOR = "#e74c3c"


def build_prompt_embed(prompt: ReviewPrompt, comment_preview_length: int = 100) -> discord.Embed:
    settings = prompt.settings
    session = prompt.session
    embed = discord.Embed(
        title=settings.embed_title,
        color=settings.color_value,
        timestamp=discord.utils.utcnow(),
    )

    if prompt.step == ReviewStep.RATING:
        embed.description = (
            f"{settings.embed_description}\n\n"
            "**Step 1 of 3:** Please select your rating\n\n"
            "How would you rate your experience?"
        )
    elif prompt.step == ReviewStep.COMMENT:
        embed.description = (
            "**Step 2 of 3:** Leave your comment\n\n"
            f"★ **Rating:** {pluralize_stars(session.rating)}\n\n"
            "Please click the button below to leave your detailed comment."
        )
    elif prompt.step == ReviewStep.PRODUCT:
        embed.description = (
            "**Step 3 of 3:** Select the product/item\n\n"
            f"★ **Rating:** {pluralize_stars(session.rating)}\n"
            f"💬 **Comment:** {preview(session.comment, comment_preview_length)}\n\n"
            "Please select the product/item you purchased."
        )
    elif prompt.step == ReviewStep.COMPLETE:
        embed.description = (
            "✅ **Review Complete!**\n\n"
            f"★ **Rating:** {pluralize_stars(session.rating)}\n"
            f"💬 **Comment:** {session.comment}\n"
            f"📦 **Product:** {session.product}\n\n"
            "Thank you for your review! It has been submitted."
        )
        embed.color = parse_hex_color(COMPLETE_COLOR)

    return embed


def build_review_announcement(review: Review, settings: GuildSettings) -> discord.Embed:
    """Embed posted in the guild's review channel."""
    embed = discord.Embed(
        title="New Review Submitted",
        color=settings.color_value,
        description=(
            f"**Customer:** {review.user_name}\n"
            f"**Rating:** {review.stars} ({review.rating}/5)\n"
            f"**Product:** {review.product}\n"
            f"**Comment:** {review.comment}"
        ),
        timestamp=discord.utils.utcnow(),
    )
    embed.set_footer(text=f"Review ID: {review.id}")
    return embed


def build_admin_embed(settings: GuildSettings) -> discord.Embed:
    embed = discord.Embed(
        title="Admin Configuration",
        description="Click the buttons below to configure the review system.",
        color=parse_hex_color(ADMIN_COLOR),
    )
    channel = f"<#{settings.review_channel_id}>" if settings.review_channel_id else "Not set"
    roles = ", ".join(f"<@&{role_id}>" for role_id in settings.admin_roles) or "None"
    embed.add_field(name="Review Channel", value=channel, inline=True)
    embed.add_field(name="Products", value=str(len(settings.products)), inline=True)
    embed.add_field(name="Admin Roles", value=roles, inline=False)
    return embed
