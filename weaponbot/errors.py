"""Exception types shared across WeaponBot."""

from __future__ import annotations


class WeaponBotError(Exception):
    """Base class for operational errors that can be reported to users."""


class PreconditionViolation(WeaponBotError):
    """A caller invoked the core with arguments it should have validated."""


class InsufficientPoolError(PreconditionViolation):
    def __init__(self, requested: int, available: int):
        super().__init__(f"Requested {requested} weapons but only {available} are available.")
        self.requested = requested
        self.available = available


class UnknownWeaponTypeError(PreconditionViolation):
    def __init__(self, weapon_type: str):
        super().__init__(f"Unknown weapon type: {weapon_type}")
        self.weapon_type = weapon_type


class WeaponStoreError(WeaponBotError):
    """Raised when the weapons database cannot be read or updated."""


class ConfigError(RuntimeError):
    """Raised at startup when the environment is misconfigured."""

    def __init__(self, problems):
        self.problems = list(problems)
        super().__init__("Invalid configuration:\n" + "\n".join(f"- {p}" for p in self.problems))


def user_message(exc: BaseException) -> str:
    if isinstance(exc, WeaponStoreError):
        return "❌ A database error occurred. Please try again in a moment."
    if isinstance(exc, PreconditionViolation):
        return f"❌ Invalid input: {exc}"
    if isinstance(exc, WeaponBotError):
        return f"❌ {exc}"
    return "❌ Something went wrong while running that command."


__all__ = [
    "ConfigError",
    "InsufficientPoolError",
    "PreconditionViolation",
    "UnknownWeaponTypeError",
    "WeaponBotError",
    "WeaponStoreError",
    "user_message",
]
