"""Embed builders for assignment posts, weapon lists and help."""

from __future__ import annotations

import re
from datetime import timedelta
from typing import List, Optional, Sequence

import discord

from .models import Assignment
from .policy import DEFAULT_COOLDOWN, format_seconds

ASSIGNMENT_COLOR = 0x4ECDC4
EXCLUDED_COLOR = 0xFF6B6B
CATALOG_COLOR = 0x4A90E2
HELP_COLOR = 0xFF6B6B

REROLL_EMOJI = "🔄"
NUMBER_EMOJIS = ("1️⃣", "2️⃣", "3️⃣", "4️⃣", "5️⃣", "6️⃣", "7️⃣", "8️⃣", "9️⃣", "🔟")

WEAPON_NAME_PATTERN = re.compile(r"→\s*\*\*(.+?)\*\*")
LIST_PAGE_SIZE = 30


def index_label(index: int) -> str:
    if index < len(NUMBER_EMOJIS):
        return NUMBER_EMOJIS[index]
    return f"**{index + 1}.**"


def assignment_lines(assignment: Assignment) -> List[str]:
    lines: List[str] = []
    for index, entry in enumerate(assignment):
        label = index_label(index)
        if entry.participant_id is not None:
            lines.append(f"{label} <@{entry.participant_id}> → **{entry.weapon}**")
        else:
            lines.append(f"{label} → **{entry.weapon}**")
    return lines


def build_assignment_embed(
    assignment: Assignment,
    disabled_count: int,
    *,
    weapon_type: Optional[str] = None,
    cooldown: timedelta = DEFAULT_COOLDOWN,
    is_reroll: bool = False,
    is_expired: bool = False,
) -> discord.Embed:
    title = "🎲 Random Weapon Draw"
    if weapon_type:
        title += f" ({weapon_type})"
    if is_reroll:
        title += " (Reroll)"

    footer = f"Players: {len(assignment)} | Excluded: {disabled_count}"
    if is_expired:
        footer += " | React with a number to exclude"
    elif not is_reroll:
        footer += (
            f" | {REROLL_EMOJI} to reroll (within {format_seconds(cooldown)}s)"
            " | React with a number to exclude"
        )

    embed = discord.Embed(
        title=title,
        description="\n".join(assignment_lines(assignment)),
        color=ASSIGNMENT_COLOR,
    )
    embed.set_footer(text=footer)
    return embed


def build_weapon_list_embeds(
    title: str,
    weapons: Sequence[str],
    *,
    color: int = CATALOG_COLOR,
    page_size: int = LIST_PAGE_SIZE,
) -> List[discord.Embed]:
    embeds: List[discord.Embed] = []
    for start in range(0, len(weapons), page_size):
        chunk = weapons[start:start + page_size]
        page_title = title if start == 0 else f"{title} (continued)"
        description = "\n".join(f"**{start + offset + 1}.** {name}" for offset, name in enumerate(chunk))
        embed = discord.Embed(title=page_title, description=description, color=color)
        embed.set_footer(text=f"Total: {len(weapons)}")
        embeds.append(embed)
    return embeds


def build_help_embed(
    prefix: str,
    weapon_types: Sequence[str],
    *,
    cooldown: timedelta = DEFAULT_COOLDOWN,
) -> discord.Embed:
    embed = discord.Embed(
        title="🎮 Random Weapon Bot",
        description="Exclude the weapons your server doesn't want to play, then draw the rest at random!",
        color=HELP_COLOR,
    )
    commands_help = (
        (f"`{prefix}random [type]`", f"Draw weapons for everyone in your voice channel\ne.g. `{prefix}random` or `{prefix}random Brush`"),
        (f"`{prefix}remove [weapon/type]`", f"Add a weapon or a whole type to the exclusion list\ne.g. `{prefix}remove Splattershot`"),
        (f"`{prefix}add [weapon/type]`", f"Remove a weapon or a whole type from the exclusion list\ne.g. `{prefix}add Shooter`"),
        (f"`{prefix}list`", "Show the excluded weapons"),
        (f"`{prefix}all`", "Show every weapon"),
        (f"`{prefix}clear`", "Clear the exclusion list"),
    )
    for name, value in commands_help:
        embed.add_field(name=name, value=value, inline=False)
    embed.add_field(
        name="💡 Reactions",
        value=(
            f"{REROLL_EMOJI} Reroll (once, within {format_seconds(cooldown)} seconds)\n"
            f"{''.join(NUMBER_EMOJIS[:3])}... Exclude the weapon on that line"
        ),
        inline=False,
    )
    embed.add_field(name="Weapon types", value=", ".join(weapon_types) or "None", inline=False)
    embed.set_footer(text="Tip: press a number reaction on a draw to exclude that weapon!")
    return embed


def weapon_from_embed(embed: Optional[discord.Embed], index: int) -> Optional[str]:
    """Read the weapon on line ``index`` of a rendered assignment embed."""
    if embed is None or not embed.description:
        return None
    lines = embed.description.split("\n")
    if index < 0 or index >= len(lines):
        return None
    match = WEAPON_NAME_PATTERN.search(lines[index])
    return match.group(1) if match else None


__all__ = [
    "NUMBER_EMOJIS",
    "REROLL_EMOJI",
    "assignment_lines",
    "build_assignment_embed",
    "build_help_embed",
    "build_weapon_list_embeds",
    "index_label",
    "weapon_from_embed",
]
