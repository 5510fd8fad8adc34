import logging
import os
import sys

import discord
from discord.ext import commands
from dotenv import load_dotenv

from weaponbot.commands import setup_weapon_features
from weaponbot.config import Settings, load_settings
from weaponbot.errors import ConfigError

load_dotenv()


def resolve_log_level(raw: str) -> str:
    level = (raw or "INFO").strip().upper()
    # load_settings reports unknown levels; fall back until then.
    if not isinstance(logging.getLevelName(level), int):
        return "INFO"
    return level


logging.basicConfig(
    level=resolve_log_level(os.getenv("WEAPONBOT_LOG_LEVEL", "INFO")),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("weaponbot")


def build_intents() -> discord.Intents:
    intents = discord.Intents.default()
    intents.message_content = True
    intents.members = True
    intents.voice_states = True
    intents.reactions = True
    return intents


class WeaponBot(commands.Bot):
    def __init__(self, settings: Settings):
        super().__init__(
            command_prefix=settings.command_prefix,
            intents=build_intents(),
            help_command=None,
        )
        self.settings = settings

    async def setup_hook(self) -> None:
        await setup_weapon_features(self, self.settings)

    async def on_ready(self) -> None:
        logger.info("Logged in as %s (id=%s)", self.user, self.user.id if self.user else "unknown")
        logger.info(
            "Serving %d guild(s) with prefix %r",
            len(self.guilds),
            self.settings.command_prefix,
        )


def create_bot(settings: Settings) -> WeaponBot:
    return WeaponBot(settings)


def main():
    try:
        settings = load_settings()
    except ConfigError as exc:
        logger.error("%s", exc)
        sys.exit(1)
    logging.getLogger().setLevel(settings.log_level)
    if settings.debug:
        logger.info("Settings: %s", settings.describe())
    bot = create_bot(settings)
    bot.run(settings.token, log_handler=None)


if __name__ == "__main__":
    main()
