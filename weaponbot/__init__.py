"""WeaponBot package: random weapon draws with reroll and exclusion reactions."""

from . import catalog, commands, config, embeds, errors, models, policy, reactions, repository, state, utils  # noqa: F401

__all__ = [
    "catalog",
    "commands",
    "config",
    "embeds",
    "errors",
    "models",
    "policy",
    "reactions",
    "repository",
    "state",
    "utils",
]
