"""Prefix commands for drawing and excluding weapons."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import discord
from discord.ext import commands

from .catalog import WeaponCatalog, default_catalog
from .config import Settings
from .embeds import (
    EXCLUDED_COLOR,
    build_assignment_embed,
    build_help_embed,
    build_weapon_list_embeds,
)
from .errors import WeaponBotError, user_message
from .expiry import ExpirationScheduler
from .messaging import reply_error, reply_info, reply_success
from .reactions import RerollWorkflow
from .repository import WeaponRepository
from .selection import (
    assignment_error,
    bind_participants,
    human_members,
    player_limit_error,
    sample_weapons,
)
from .state import MessageStateStore
from .utils import is_admin

logger = logging.getLogger("weaponbot.commands")


class WeaponCog(commands.Cog):
    """Weapon draw commands plus the reaction listener for posted draws."""

    def __init__(
        self,
        bot: commands.Bot,
        *,
        settings: Settings,
        catalog: WeaponCatalog,
        repository: WeaponRepository,
        workflow: RerollWorkflow,
    ):
        self.bot = bot
        self.settings = settings
        self.catalog = catalog
        self.repository = repository
        self.workflow = workflow

    async def cog_load(self) -> None:
        self.workflow.start()

    async def cog_unload(self) -> None:
        await self.workflow.close()
        self.repository.dispose()

    async def cog_command_error(self, ctx: commands.Context, error: commands.CommandError) -> None:
        original = getattr(error, "original", error)
        if isinstance(original, WeaponBotError):
            logger.warning("Command %s failed: %s", ctx.command, original)
        else:
            logger.error("Command %s raised an unexpected error", ctx.command, exc_info=original)
        try:
            await ctx.reply(user_message(original), mention_author=False)
        except discord.HTTPException as exc:
            logger.warning("Failed to report command error to the user: %s", exc)

    @commands.Cog.listener()
    async def on_raw_reaction_add(self, payload: discord.RawReactionActionEvent) -> None:
        await self.workflow.on_raw_reaction_add(payload)

    @property
    def prefix(self) -> str:
        return self.settings.command_prefix

    async def _ensure_manager(self, ctx: commands.Context) -> bool:
        if not self.settings.admin_only or is_admin(ctx.author):
            return True
        await reply_error(ctx, "Only administrators can change the exclusion list.")
        return False

    #
    # Draws
    #
    @commands.command(name="random", help="Draw weapons for everyone in your voice channel.")
    async def random_command(self, ctx: commands.Context, *, weapon_type: str = "") -> None:
        if ctx.guild is None:
            await reply_error(ctx, "Run this command inside a server.")
            return
        voice = getattr(ctx.author, "voice", None)
        voice_channel = getattr(voice, "channel", None)
        if voice_channel is None:
            await reply_error(ctx, "Join a voice channel first!")
            return
        members = human_members(voice_channel)
        if not members:
            await reply_error(ctx, "Nobody is in the voice channel!")
            return

        type_filter: Optional[str] = None
        if weapon_type.strip():
            type_filter = self.catalog.resolve_type(weapon_type)
            if type_filter is None:
                await reply_error(
                    ctx,
                    f'Weapon type "{weapon_type.strip()}" doesn\'t exist!\n'
                    f"Valid types: {', '.join(self.catalog.types)}",
                )
                return

        too_many = player_limit_error(len(members), self.settings.max_players)
        if too_many:
            await reply_error(ctx, too_many)
            return

        pool = await self.repository.list_enabled(type_filter)
        disabled = await self.repository.list_disabled()
        problem = assignment_error(len(members), len(pool), type_filter, prefix=self.prefix)
        if problem:
            await reply_error(ctx, problem)
            return

        weapons = sample_weapons(pool, len(members))
        assignment = bind_participants([member.id for member in members], weapons)
        embed = build_assignment_embed(
            assignment,
            len(disabled),
            weapon_type=type_filter,
            cooldown=self.settings.reroll_cooldown,
        )
        sent = await ctx.reply(embed=embed, mention_author=False)
        await self.workflow.on_assignment_posted(
            sent,
            assignment,
            disabled_count=len(disabled),
            weapon_type=type_filter,
        )

    #
    # Exclusion list
    #
    @commands.command(name="remove", help="Add a weapon or weapon type to the exclusion list.")
    async def remove_command(self, ctx: commands.Context, *, target: str = "") -> None:
        if not await self._ensure_manager(ctx):
            return
        text = target.strip()
        if not text:
            await reply_error(
                ctx,
                "Tell me which weapon or weapon type to exclude!\n"
                f"e.g. `{self.prefix}remove Splattershot` or `{self.prefix}remove Brush`",
            )
            return

        weapon_type = self.catalog.resolve_type(text)
        if weapon_type is not None:
            result = await self.repository.set_eligible_for_type(weapon_type, False)
            if result.success:
                await reply_success(ctx, f"Added {result.count} **{weapon_type}** weapons to the exclusion list!")
            else:
                await reply_error(ctx, result.message)
            return

        weapon = self.catalog.resolve_weapon(text)
        if weapon is None:
            await reply_error(ctx, f"That weapon doesn't exist. Check `{self.prefix}all` for the full list.")
            return
        result = await self.repository.set_eligible(weapon, False)
        if result.success:
            await reply_success(ctx, f"Added **{weapon}** to the exclusion list!")
        else:
            await reply_error(ctx, result.message)

    @commands.command(name="add", help="Remove a weapon or weapon type from the exclusion list.")
    async def add_command(self, ctx: commands.Context, *, target: str = "") -> None:
        if not await self._ensure_manager(ctx):
            return
        text = target.strip()
        if not text:
            await reply_error(
                ctx,
                "Tell me which weapon or weapon type to bring back!\n"
                f"e.g. `{self.prefix}add Splattershot` or `{self.prefix}add Brush`",
            )
            return

        weapon_type = self.catalog.resolve_type(text)
        if weapon_type is not None:
            result = await self.repository.set_eligible_for_type(weapon_type, True)
            if result.success:
                await reply_success(ctx, f"Removed {result.count} **{weapon_type}** weapons from the exclusion list!")
            else:
                await reply_error(ctx, result.message)
            return

        weapon = self.catalog.resolve_weapon(text) or text
        result = await self.repository.set_eligible(weapon, True)
        if result.success:
            await reply_success(ctx, f"Removed **{weapon}** from the exclusion list!")
        else:
            await reply_error(ctx, result.message)

    @commands.command(name="list", help="Show the excluded weapons.")
    async def list_command(self, ctx: commands.Context) -> None:
        disabled = await self.repository.list_disabled()
        if not disabled:
            await reply_info(ctx, "No weapons are excluded right now.")
            return
        for embed in build_weapon_list_embeds("🚫 Excluded Weapons", disabled, color=EXCLUDED_COLOR):
            await ctx.reply(embed=embed, mention_author=False)

    @commands.command(name="all", help="Show every weapon.")
    async def all_command(self, ctx: commands.Context) -> None:
        for embed in build_weapon_list_embeds("📜 All Weapons", self.catalog.names()):
            await ctx.reply(embed=embed, mention_author=False)

    @commands.command(name="clear", help="Clear the exclusion list.")
    async def clear_command(self, ctx: commands.Context) -> None:
        if not await self._ensure_manager(ctx):
            return
        restored = await self.repository.reset_all_eligible()
        if restored == 0:
            await reply_info(ctx, "The exclusion list is already empty.")
            return
        await reply_success(ctx, f"Cleared the exclusion list! ({restored} weapons re-enabled)")

    @commands.command(name="help", help="Show help.")
    async def help_command(self, ctx: commands.Context) -> None:
        embed = build_help_embed(self.prefix, self.catalog.types, cooldown=self.settings.reroll_cooldown)
        await ctx.reply(embed=embed, mention_author=False)


async def setup_weapon_features(
    bot: commands.Bot,
    settings: Settings,
    *,
    catalog: Optional[WeaponCatalog] = None,
    repository: Optional[WeaponRepository] = None,
) -> WeaponCog:
    catalog = catalog or default_catalog()
    repository = repository or WeaponRepository.from_path(settings.db_path, catalog)
    seeded = await asyncio.to_thread(repository.initialize)
    store = MessageStateStore(retention=settings.state_retention)
    scheduler = ExpirationScheduler(store, delay=settings.reroll_cooldown)
    workflow = RerollWorkflow(
        bot,
        repository,
        store,
        scheduler=scheduler,
        cooldown=settings.reroll_cooldown,
        sweep_interval=settings.sweep_interval,
        command_prefix=settings.command_prefix,
        max_players=settings.max_players,
    )
    cog = WeaponCog(bot, settings=settings, catalog=catalog, repository=repository, workflow=workflow)
    await bot.add_cog(cog)
    logger.info(
        "Weapon features ready: %d weapons in %d classes (%d newly seeded)",
        len(catalog),
        len(catalog.types),
        seeded,
    )
    return cog


__all__ = ["WeaponCog", "setup_weapon_features"]
