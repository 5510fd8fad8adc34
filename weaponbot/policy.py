"""Reroll decision rules for assignment messages."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from .models import MessageState

DEFAULT_COOLDOWN = timedelta(seconds=20)


class MessagePhase(enum.Enum):
    NO_RECORD = "no_record"
    ACTIVE = "active"
    EXPIRED = "expired"
    CONSUMED = "consumed"


class RerollOutcome(enum.Enum):
    ACCEPTED = "accepted"
    NO_RECORD = "no_record"
    ALREADY_USED = "already_used"
    EXPIRED = "expired"


@dataclass(frozen=True)
class RerollDecision:
    outcome: RerollOutcome
    clear_affordance: bool

    @property
    def accepted(self) -> bool:
        return self.outcome is RerollOutcome.ACCEPTED


def cooldown_elapsed(state: MessageState, now: datetime, cooldown: timedelta) -> bool:
    return now - state.created_at > cooldown


def message_phase(state: Optional[MessageState], now: datetime, cooldown: timedelta) -> MessagePhase:
    if state is None:
        return MessagePhase.NO_RECORD
    if state.rerolled:
        return MessagePhase.CONSUMED
    if cooldown_elapsed(state, now, cooldown):
        return MessagePhase.EXPIRED
    return MessagePhase.ACTIVE


def decide_reroll(
    state: Optional[MessageState],
    now: datetime,
    cooldown: timedelta = DEFAULT_COOLDOWN,
) -> RerollDecision:
    """Decide whether a reroll reaction is honored.

    A consumed reroll is reported before an expired one: both can hold at
    once and users get a different message for each. The shared reroll
    reaction stays on consumed messages so later attempts keep getting the
    same answer.
    """
    phase = message_phase(state, now, cooldown)
    if phase is MessagePhase.NO_RECORD:
        return RerollDecision(RerollOutcome.NO_RECORD, clear_affordance=True)
    if phase is MessagePhase.CONSUMED:
        return RerollDecision(RerollOutcome.ALREADY_USED, clear_affordance=False)
    if phase is MessagePhase.EXPIRED:
        return RerollDecision(RerollOutcome.EXPIRED, clear_affordance=True)
    return RerollDecision(RerollOutcome.ACCEPTED, clear_affordance=True)


def format_seconds(delta: timedelta) -> str:
    seconds = delta.total_seconds()
    if seconds == int(seconds):
        return str(int(seconds))
    return f"{seconds:g}"


def rejection_message(outcome: RerollOutcome, cooldown: timedelta = DEFAULT_COOLDOWN) -> Optional[str]:
    if outcome is RerollOutcome.NO_RECORD:
        return "⚠️ This message can't be rerolled."
    if outcome is RerollOutcome.ALREADY_USED:
        return "❌ Each draw can only be rerolled once."
    if outcome is RerollOutcome.EXPIRED:
        return f"❌ Rerolls are only available within the first {format_seconds(cooldown)} seconds."
    return None


__all__ = [
    "DEFAULT_COOLDOWN",
    "MessagePhase",
    "RerollDecision",
    "RerollOutcome",
    "cooldown_elapsed",
    "decide_reroll",
    "format_seconds",
    "message_phase",
    "rejection_message",
]
