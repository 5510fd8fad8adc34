"""Utility helpers for WeaponBot."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable

import discord


TRUTHY_VALUES = ("true", "1", "yes", "on")


def parse_bool(raw: str) -> bool:
    return raw.strip().lower() in TRUTHY_VALUES


def is_admin(member: discord.abc.User) -> bool:
    if isinstance(member, discord.Member):
        if member.guild_permissions.administrator:
            return True
        roles: Iterable[discord.Role] = getattr(member, "roles", [])
        return any(role.name.lower() == "admin" for role in roles)
    return False


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


__all__ = [
    "is_admin",
    "parse_bool",
    "utc_now",
]
