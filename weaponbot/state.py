"""In-memory reroll state for posted assignment messages."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional

from .models import Assignment, MessageState
from .utils import utc_now

logger = logging.getLogger("weaponbot.state")

DEFAULT_RETENTION = timedelta(hours=1)
DEFAULT_SWEEP_INTERVAL = timedelta(minutes=5)


class MessageStateStore:
    """Owns the per-message reroll records.

    Every accessor is synchronous, so on the event loop each call runs
    without interleaving. Handlers that check a record, await I/O and then
    write it back must hold ``lock_for(message_id)`` across the whole
    sequence.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], datetime] = utc_now,
        retention: timedelta = DEFAULT_RETENTION,
    ):
        self._clock = clock
        self.retention = retention
        self._states: Dict[int, MessageState] = {}
        self._locks: Dict[int, asyncio.Lock] = {}
        self._sweep_task: Optional[asyncio.Task] = None

    def now(self) -> datetime:
        return self._clock()

    def register(
        self,
        message_id: int,
        assignment: Assignment = (),
        *,
        weapon_type: Optional[str] = None,
        disabled_count: int = 0,
    ) -> MessageState:
        existing = self._states.get(message_id)
        if existing is not None:
            # Only the first post time governs the cooldown.
            return existing
        state = MessageState(
            message_id=message_id,
            created_at=self._clock(),
            assignment=tuple(assignment),
            weapon_type=weapon_type,
            disabled_count=disabled_count,
        )
        self._states[message_id] = state
        logger.debug("Registered assignment message %s", message_id)
        return state

    def get(self, message_id: int) -> Optional[MessageState]:
        return self._states.get(message_id)

    def get_created_at(self, message_id: int) -> Optional[datetime]:
        state = self._states.get(message_id)
        return state.created_at if state else None

    def is_rerolled(self, message_id: int) -> bool:
        state = self._states.get(message_id)
        return bool(state and state.rerolled)

    def mark_rerolled(self, message_id: int) -> bool:
        state = self._states.get(message_id)
        if state is None:
            return False
        if not state.rerolled:
            self._states[message_id] = replace(state, rerolled=True)
        return True

    def update_assignment(
        self,
        message_id: int,
        assignment: Assignment,
        *,
        disabled_count: Optional[int] = None,
    ) -> Optional[MessageState]:
        state = self._states.get(message_id)
        if state is None:
            return None
        changes: Dict[str, object] = {"assignment": tuple(assignment), "redrawn": True}
        if disabled_count is not None:
            changes["disabled_count"] = disabled_count
        updated = replace(state, **changes)
        self._states[message_id] = updated
        return updated

    def lock_for(self, message_id: int) -> asyncio.Lock:
        return self._locks.setdefault(message_id, asyncio.Lock())

    def sweep(self, now: Optional[datetime] = None) -> int:
        cutoff = (now or self._clock()) - self.retention
        stale = [message_id for message_id, state in self._states.items() if state.created_at < cutoff]
        for message_id in stale:
            self._states.pop(message_id, None)
        orphaned = [
            message_id
            for message_id, lock in self._locks.items()
            if message_id not in self._states and not lock.locked()
        ]
        for message_id in orphaned:
            self._locks.pop(message_id, None)
        if stale:
            logger.debug("Swept %d stale assignment message(s)", len(stale))
        return len(stale)

    def clear(self) -> None:
        self._states.clear()
        self._locks.clear()

    def __len__(self) -> int:
        return len(self._states)

    def __contains__(self, message_id: object) -> bool:
        return message_id in self._states

    #
    # Background eviction
    #
    def start_sweeper(self, interval: timedelta = DEFAULT_SWEEP_INTERVAL) -> asyncio.Task:
        if self._sweep_task is not None and not self._sweep_task.done():
            return self._sweep_task
        self._sweep_task = asyncio.create_task(self._sweep_loop(interval.total_seconds()))
        return self._sweep_task

    async def stop_sweeper(self) -> None:
        task = self._sweep_task
        self._sweep_task = None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _sweep_loop(self, interval_seconds: float) -> None:
        while True:
            await asyncio.sleep(interval_seconds)
            try:
                self.sweep()
            except Exception:
                logger.exception("Unexpected error while sweeping message state")


__all__ = ["DEFAULT_RETENTION", "DEFAULT_SWEEP_INTERVAL", "MessageStateStore"]
