"""Random weapon draws and participant binding."""

from __future__ import annotations

import random
from typing import List, Optional, Sequence

from .errors import InsufficientPoolError, PreconditionViolation
from .models import Assignment, AssignmentEntry


def sample_weapons(
    pool: Sequence[str],
    count: int,
    rng: Optional[random.Random] = None,
) -> List[str]:
    """Draw ``count`` weapons uniformly without replacement."""
    if count < 0:
        raise PreconditionViolation(f"Cannot draw a negative number of weapons ({count}).")
    if count > len(pool):
        raise InsufficientPoolError(count, len(pool))
    source = rng or random
    return source.sample(list(pool), count)


def bind_participants(participants: Sequence[int], weapons: Sequence[str]) -> Assignment:
    if len(participants) != len(weapons):
        raise PreconditionViolation(
            f"Cannot pair {len(participants)} participants with {len(weapons)} weapons."
        )
    return tuple(
        AssignmentEntry(weapon=weapon, participant_id=participant)
        for participant, weapon in zip(participants, weapons)
    )


def anonymous_assignment(weapons: Sequence[str]) -> Assignment:
    return tuple(AssignmentEntry(weapon=weapon) for weapon in weapons)


def human_members(voice_channel) -> list:
    members = getattr(voice_channel, "members", None) or []
    return [member for member in members if not getattr(member, "bot", False)]


def player_limit_error(member_count: int, max_players: int) -> Optional[str]:
    if member_count > max_players:
        return f"Draws support at most {max_players} players ({member_count} are in the channel)."
    return None


def assignment_error(
    member_count: int,
    weapon_count: int,
    weapon_type: Optional[str] = None,
    *,
    prefix: str = "!",
) -> Optional[str]:
    """Return the reason a draw can't happen, or None when it can."""
    if weapon_count == 0:
        if weapon_type:
            return f"Every {weapon_type} weapon is excluded or none exist."
        return f"Every weapon is excluded! Use `{prefix}clear` to reset the exclusion list."
    if member_count > weapon_count:
        return f"Only {weapon_count} weapons are available. There are too many players."
    return None


__all__ = [
    "anonymous_assignment",
    "assignment_error",
    "bind_participants",
    "human_members",
    "player_limit_error",
    "sample_weapons",
]
