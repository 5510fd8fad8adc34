"""One-shot timers that retire the reroll reaction on assignment posts."""

from __future__ import annotations

import asyncio
import logging
from datetime import timedelta
from typing import Dict

import discord

from .embeds import REROLL_EMOJI, build_assignment_embed
from .messaging import clear_reaction_best_effort, edit_best_effort, has_reaction
from .policy import DEFAULT_COOLDOWN
from .state import MessageStateStore

logger = logging.getLogger("weaponbot.expiry")


class ExpirationScheduler:
    """Arms one timer per posted message for the reroll window.

    Timers are not cancelled when a reroll succeeds; firing late just
    re-renders the message with the exclusion-only footer.
    """

    def __init__(self, store: MessageStateStore, *, delay: timedelta = DEFAULT_COOLDOWN):
        self.store = store
        self.delay = delay
        self._tasks: Dict[int, asyncio.Task] = {}

    @property
    def pending(self) -> int:
        return sum(1 for task in self._tasks.values() if not task.done())

    def arm(self, message) -> asyncio.Task:
        self.cancel(message.id)
        task = asyncio.create_task(self._expire_after(message, self.delay.total_seconds()))
        self._tasks[message.id] = task
        return task

    def cancel(self, message_id: int) -> bool:
        task = self._tasks.pop(message_id, None)
        if task is None or task.done():
            return False
        task.cancel()
        return True

    async def shutdown(self) -> None:
        tasks = [task for task in self._tasks.values() if not task.done()]
        self._tasks.clear()
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def _expire_after(self, message, delay: float) -> None:
        try:
            await asyncio.sleep(delay)
            await self.expire(message)
        except asyncio.CancelledError:
            logger.debug("Expiry timer for message %s cancelled", message.id)
        except Exception:
            logger.exception("Unexpected error while expiring reroll on message %s", message.id)
        finally:
            if self._tasks.get(message.id) is asyncio.current_task():
                self._tasks.pop(message.id, None)

    async def expire(self, message) -> None:
        # Serialize with an in-flight reroll so the expired rendering shows its result.
        async with self.store.lock_for(message.id):
            await self._expire(message)

    async def _expire(self, message) -> None:
        try:
            current = await message.channel.fetch_message(message.id)
        except discord.HTTPException as exc:
            logger.warning("Could not refresh message %s for reroll expiry: %s", message.id, exc)
            return

        if has_reaction(current, REROLL_EMOJI):
            await clear_reaction_best_effort(current, REROLL_EMOJI)

        state = self.store.get(message.id)
        if state is None:
            logger.debug("No state left for message %s; skipping expiry edit", message.id)
            return
        embed = build_assignment_embed(
            state.assignment,
            state.disabled_count,
            weapon_type=state.weapon_type,
            cooldown=self.delay,
            is_reroll=state.redrawn,
            is_expired=True,
        )
        await edit_best_effort(current, embed=embed)


__all__ = ["ExpirationScheduler"]
