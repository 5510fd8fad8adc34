"""Reroll and exclusion reactions on weapon assignment posts."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import List, Optional, Tuple

import discord
from discord.ext import commands

from .embeds import NUMBER_EMOJIS, REROLL_EMOJI, build_assignment_embed, weapon_from_embed
from .errors import WeaponStoreError
from .expiry import ExpirationScheduler
from .messaging import (
    clear_reaction_best_effort,
    edit_best_effort,
    remove_user_reaction,
    send_best_effort,
)
from .models import Assignment, MessageState, ReactionEvent
from .policy import DEFAULT_COOLDOWN, RerollDecision, decide_reroll, rejection_message
from .repository import WeaponRepository
from .selection import (
    anonymous_assignment,
    assignment_error,
    bind_participants,
    human_members,
    player_limit_error,
    sample_weapons,
)
from .state import DEFAULT_SWEEP_INTERVAL, MessageStateStore

logger = logging.getLogger("weaponbot.reactions")


class ReactionKind(enum.Enum):
    REROLL = "reroll"
    EXCLUDE = "exclude"
    IGNORE = "ignore"


@dataclass(frozen=True)
class ReactionAction:
    kind: ReactionKind
    index: Optional[int] = None


def classify_reaction(emoji: str) -> ReactionAction:
    if emoji == REROLL_EMOJI:
        return ReactionAction(ReactionKind.REROLL)
    if emoji in NUMBER_EMOJIS:
        return ReactionAction(ReactionKind.EXCLUDE, NUMBER_EMOJIS.index(emoji))
    return ReactionAction(ReactionKind.IGNORE)


class RerollWorkflow:
    """Tracks posted draws and reacts to 🔄 and number reactions on them."""

    def __init__(
        self,
        bot: commands.Bot,
        repository: WeaponRepository,
        store: MessageStateStore,
        *,
        scheduler: Optional[ExpirationScheduler] = None,
        cooldown: timedelta = DEFAULT_COOLDOWN,
        sweep_interval: timedelta = DEFAULT_SWEEP_INTERVAL,
        command_prefix: str = "!",
        max_players: int = 10,
    ):
        self.bot = bot
        self.repository = repository
        self.store = store
        self.cooldown = cooldown
        self.scheduler = scheduler or ExpirationScheduler(store, delay=cooldown)
        self.sweep_interval = sweep_interval
        self.command_prefix = command_prefix
        self.max_players = max_players

    #
    # Lifecycle
    #
    def start(self) -> None:
        self.store.start_sweeper(self.sweep_interval)

    async def close(self) -> None:
        await self.store.stop_sweeper()
        await self.scheduler.shutdown()

    #
    # Posting
    #
    async def on_assignment_posted(
        self,
        message: discord.Message,
        assignment: Assignment,
        *,
        disabled_count: int,
        weapon_type: Optional[str] = None,
    ) -> MessageState:
        state = self.store.register(
            message.id,
            assignment,
            weapon_type=weapon_type,
            disabled_count=disabled_count,
        )
        emojis = (REROLL_EMOJI,) + NUMBER_EMOJIS[: min(len(assignment), len(NUMBER_EMOJIS))]
        for emoji in emojis:
            try:
                await message.add_reaction(emoji)
            except discord.HTTPException:
                logger.debug("Failed to add reaction %s to assignment message %s", emoji, message.id)
        self.scheduler.arm(message)
        return state

    #
    # Routing
    #
    async def on_raw_reaction_add(self, payload: discord.RawReactionActionEvent) -> None:
        if payload.guild_id is None:
            return
        await self.on_reaction_event(ReactionEvent.from_payload(payload))

    async def on_reaction_event(self, event: ReactionEvent) -> Optional[ReactionAction]:
        own_user = self.bot.user
        if event.is_bot or (own_user is not None and event.user_id == own_user.id):
            return None

        message = event.message
        if message is None:
            message = await self._resolve_message(event)
            if message is None:
                return None
            event.message = message

        if own_user is None or message.author.id != own_user.id:
            return None

        action = classify_reaction(event.emoji)
        if action.kind is ReactionKind.IGNORE:
            return None
        if action.kind is ReactionKind.REROLL:
            await self.reroll(message, event)
        else:
            await self.exclude(message, event, action.index)

        await remove_user_reaction(message, event.emoji, event.member or discord.Object(id=event.user_id))
        return action

    async def _resolve_message(self, event: ReactionEvent) -> Optional[discord.Message]:
        channel = self.bot.get_channel(event.channel_id)
        try:
            if channel is None:
                channel = await self.bot.fetch_channel(event.channel_id)
            return await channel.fetch_message(event.message_id)
        except discord.HTTPException as exc:
            logger.warning("Dropping reaction on message %s: could not fetch it (%s)", event.message_id, exc)
            return None

    #
    # Reroll
    #
    async def reroll(self, message: discord.Message, event: ReactionEvent) -> RerollDecision:
        async with self.store.lock_for(message.id):
            state = self.store.get(message.id)
            decision = decide_reroll(state, self.store.now(), self.cooldown)
            if not decision.accepted:
                logger.info(
                    "Rejected reroll on message %s by user %s: %s",
                    message.id,
                    event.user_id,
                    decision.outcome.value,
                )
                await send_best_effort(message.channel, rejection_message(decision.outcome, self.cooldown))
                if decision.clear_affordance:
                    await clear_reaction_best_effort(message, REROLL_EMOJI)
                return decision

            redraw = await self._redraw(message, event, state)
            # One reroll per message, even when the redraw could not be made.
            self.store.mark_rerolled(message.id)
            updated = None
            if redraw is not None:
                assignment, disabled_count = redraw
                updated = self.store.update_assignment(message.id, assignment, disabled_count=disabled_count)
            if updated is not None:
                embed = build_assignment_embed(
                    updated.assignment,
                    updated.disabled_count,
                    weapon_type=updated.weapon_type,
                    cooldown=self.cooldown,
                    is_reroll=True,
                )
                await edit_best_effort(message, embed=embed)
                logger.info("Rerolled message %s for user %s", message.id, event.user_id)
            await clear_reaction_best_effort(message, REROLL_EMOJI)
            return decision

    async def _redraw(
        self,
        message: discord.Message,
        event: ReactionEvent,
        state: MessageState,
    ) -> Optional[Tuple[Assignment, int]]:
        member = event.member or await self._fetch_member(message, event.user_id)
        voice = getattr(member, "voice", None)
        voice_channel = getattr(voice, "channel", None)
        participants: List[Optional[int]]
        if voice_channel is not None:
            participants = [m.id for m in human_members(voice_channel)]
        else:
            participants = [None] * len(state.assignment)
        if not participants:
            await send_best_effort(message.channel, "⚠️ Nobody is left to reroll for.")
            return None
        too_many = player_limit_error(len(participants), self.max_players)
        if too_many:
            await send_best_effort(message.channel, f"❌ {too_many}")
            return None

        try:
            pool = await self.repository.list_enabled(state.weapon_type)
            disabled = await self.repository.list_disabled()
        except WeaponStoreError as exc:
            logger.warning("Reroll on message %s failed to read weapons: %s", message.id, exc)
            return None

        problem = assignment_error(len(participants), len(pool), state.weapon_type, prefix=self.command_prefix)
        if problem:
            await send_best_effort(message.channel, f"❌ {problem}")
            return None

        weapons = sample_weapons(pool, len(participants))
        if voice_channel is not None:
            assignment = bind_participants(participants, weapons)
        else:
            assignment = anonymous_assignment(weapons)
        return assignment, len(disabled)

    async def _fetch_member(self, message: discord.Message, user_id: int) -> Optional[discord.Member]:
        guild = getattr(message, "guild", None)
        if guild is None:
            return None
        member = guild.get_member(user_id)
        if member is not None:
            return member
        try:
            return await guild.fetch_member(user_id)
        except discord.HTTPException as exc:
            logger.debug("Could not fetch member %s: %s", user_id, exc)
            return None

    #
    # Exclusion
    #
    async def exclude(self, message: discord.Message, event: ReactionEvent, index: int) -> Optional[str]:
        """Exclude the weapon on line ``index``; returns its name on success.

        Failures are silent in chat: the weapon may already be excluded or
        the line may not exist.
        """
        weapon = self._weapon_at(message, index)
        if weapon is None:
            logger.debug("No weapon on line %s of message %s", index + 1, message.id)
            return None
        try:
            result = await self.repository.set_eligible(weapon, False)
        except WeaponStoreError as exc:
            logger.warning("Failed to exclude %s from message %s: %s", weapon, message.id, exc)
            return None
        if not result.success:
            logger.info("Exclusion of %s by user %s skipped: %s", weapon, event.user_id, result.message)
            return None
        await send_best_effort(
            message.channel,
            f"✅ <@{event.user_id}> added **{weapon}** to the exclusion list",
        )
        return weapon

    def _weapon_at(self, message: discord.Message, index: int) -> Optional[str]:
        state = self.store.get(message.id)
        if state is not None:
            if 0 <= index < len(state.assignment):
                return state.assignment[index].weapon
            return None
        # Posts from before a restart or past the retention window.
        embeds = getattr(message, "embeds", None) or []
        return weapon_from_embed(embeds[0] if embeds else None, index)


__all__ = ["ReactionAction", "ReactionKind", "RerollWorkflow", "classify_reaction"]
