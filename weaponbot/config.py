"""Environment-driven settings for WeaponBot."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import List, Mapping, Optional

from .errors import ConfigError
from .utils import parse_bool

MAX_REROLL_COOLDOWN_MS = 300_000
PLAYER_LIMIT_RANGE = (1, 20)


@dataclass(frozen=True)
class Settings:
    token: str
    command_prefix: str = "!"
    reroll_cooldown: timedelta = timedelta(seconds=20)
    max_players: int = 10
    db_path: Path = Path("data/weapons.db")
    state_retention: timedelta = timedelta(hours=1)
    sweep_interval: timedelta = timedelta(minutes=5)
    admin_only: bool = False
    log_level: str = "INFO"
    debug: bool = False

    def describe(self) -> str:
        masked = f"{self.token[:4]}…" if self.token else "<missing>"
        return (
            f"token={masked} prefix={self.command_prefix!r} "
            f"reroll_cooldown={self.reroll_cooldown.total_seconds():g}s max_players={self.max_players} "
            f"db_path={self.db_path} retention={self.state_retention} sweep={self.sweep_interval} "
            f"admin_only={self.admin_only} log_level={self.log_level}"
        )


def _int_setting(
    env: Mapping[str, str],
    name: str,
    default: int,
    problems: List[str],
    *,
    minimum: Optional[int] = None,
    maximum: Optional[int] = None,
) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        problems.append(f"{name} must be an integer (got {raw!r}).")
        return default
    if (minimum is not None and value < minimum) or (maximum is not None and value > maximum):
        if maximum is None:
            problems.append(f"{name} must be at least {minimum} (got {value}).")
        else:
            problems.append(f"{name} must be between {minimum} and {maximum} (got {value}).")
        return default
    return value


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Read settings from ``env`` (defaults to ``os.environ``).

    Every problem is collected and reported together in one ConfigError.
    """
    env = os.environ if env is None else env
    problems: List[str] = []

    token = (env.get("DISCORD_TOKEN") or "").strip()
    if not token:
        problems.append("DISCORD_TOKEN is required. Set it in your environment or .env file.")

    prefix = env.get("WEAPONBOT_PREFIX", "!").strip() or "!"
    cooldown_ms = _int_setting(
        env, "WEAPONBOT_REROLL_COOLDOWN_MS", 20_000, problems, minimum=0, maximum=MAX_REROLL_COOLDOWN_MS
    )
    max_players = _int_setting(
        env, "WEAPONBOT_MAX_PLAYERS", 10, problems, minimum=PLAYER_LIMIT_RANGE[0], maximum=PLAYER_LIMIT_RANGE[1]
    )
    retention_minutes = _int_setting(env, "WEAPONBOT_STATE_RETENTION_MINUTES", 60, problems, minimum=1)
    sweep_seconds = _int_setting(env, "WEAPONBOT_SWEEP_INTERVAL_SECONDS", 300, problems, minimum=1)

    db_setting = (env.get("WEAPONBOT_DB_PATH") or "").strip() or "data/weapons.db"
    log_level = (env.get("WEAPONBOT_LOG_LEVEL") or "INFO").strip().upper()
    if not isinstance(logging.getLevelName(log_level), int):
        problems.append(f"WEAPONBOT_LOG_LEVEL {log_level!r} is not a logging level.")
        log_level = "INFO"

    if problems:
        raise ConfigError(problems)

    return Settings(
        token=token,
        command_prefix=prefix,
        reroll_cooldown=timedelta(milliseconds=cooldown_ms),
        max_players=max_players,
        db_path=Path(db_setting).expanduser(),
        state_retention=timedelta(minutes=retention_minutes),
        sweep_interval=timedelta(seconds=sweep_seconds),
        admin_only=parse_bool(env.get("WEAPONBOT_ADMIN_ONLY", "false")),
        log_level=log_level,
        debug=parse_bool(env.get("WEAPONBOT_DEBUG", "false")),
    )


__all__ = ["Settings", "load_settings"]
