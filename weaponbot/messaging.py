"""Best-effort Discord calls and reply helpers."""

from __future__ import annotations

import logging
from typing import Optional

import discord
from discord.ext import commands

logger = logging.getLogger("weaponbot.messaging")


async def send_best_effort(channel, content: str) -> Optional[discord.Message]:
    try:
        return await channel.send(content, allowed_mentions=discord.AllowedMentions(users=False))
    except discord.HTTPException as exc:
        logger.warning("Failed to send message in channel %s: %s", getattr(channel, "id", "unknown"), exc)
        return None


async def edit_best_effort(message, **kwargs) -> bool:
    try:
        await message.edit(**kwargs)
    except discord.HTTPException as exc:
        logger.warning("Failed to edit message %s: %s", getattr(message, "id", "unknown"), exc)
        return False
    return True


async def clear_reaction_best_effort(message, emoji: str) -> bool:
    try:
        await message.clear_reaction(emoji)
    except discord.HTTPException as exc:
        logger.warning("Failed to clear %s from message %s: %s", emoji, getattr(message, "id", "unknown"), exc)
        return False
    return True


async def remove_user_reaction(message, emoji: str, user) -> bool:
    try:
        await message.remove_reaction(emoji, user)
    except discord.HTTPException as exc:
        logger.warning(
            "Failed to remove %s by user %s on message %s: %s",
            emoji,
            getattr(user, "id", "unknown"),
            getattr(message, "id", "unknown"),
            exc,
        )
        return False
    return True


def has_reaction(message, emoji: str) -> bool:
    return any(str(reaction.emoji) == emoji for reaction in getattr(message, "reactions", ()))


async def reply_error(ctx: commands.Context, text: str):
    return await ctx.reply(f"❌ {text}", mention_author=False)


async def reply_success(ctx: commands.Context, text: str):
    return await ctx.reply(f"✅ {text}", mention_author=False)


async def reply_info(ctx: commands.Context, text: str):
    return await ctx.reply(f"📋 {text}", mention_author=False)


__all__ = [
    "clear_reaction_best_effort",
    "edit_best_effort",
    "has_reaction",
    "remove_user_reaction",
    "reply_error",
    "reply_info",
    "reply_success",
    "send_best_effort",
]
