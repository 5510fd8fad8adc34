"""Dataclasses and shared type definitions for WeaponBot."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Tuple

import discord


@dataclass(frozen=True)
class WeaponSpec:
    name: str
    weapon_type: str


@dataclass(frozen=True)
class AssignmentEntry:
    weapon: str
    participant_id: Optional[int] = None


Assignment = Tuple[AssignmentEntry, ...]


@dataclass(frozen=True)
class MessageState:
    """Reroll bookkeeping for one posted assignment message.

    Instances are immutable; the state store swaps in updated copies so no
    other component can change a record behind its back.
    """

    message_id: int
    created_at: datetime
    rerolled: bool = False
    redrawn: bool = False
    assignment: Assignment = ()
    weapon_type: Optional[str] = None
    disabled_count: int = 0


@dataclass(frozen=True)
class ToggleResult:
    success: bool
    message: str = ""
    count: int = 0


@dataclass
class ReactionEvent:
    user_id: int
    message_id: int
    channel_id: int
    emoji: str
    guild_id: Optional[int] = None
    member: Optional[Any] = None
    is_bot: bool = False
    message: Optional[Any] = None

    @property
    def partial(self) -> bool:
        return self.message is None

    @classmethod
    def from_payload(cls, payload: discord.RawReactionActionEvent) -> "ReactionEvent":
        member = payload.member
        return cls(
            user_id=payload.user_id,
            message_id=payload.message_id,
            channel_id=payload.channel_id,
            emoji=str(payload.emoji),
            guild_id=payload.guild_id,
            member=member,
            is_bot=bool(member is not None and member.bot),
        )


__all__ = [
    "Assignment",
    "AssignmentEntry",
    "MessageState",
    "ReactionEvent",
    "ToggleResult",
    "WeaponSpec",
]
