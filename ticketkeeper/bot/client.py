"""
Discord bot client for ticketkeeper
Builds the ticket services once, loads the cogs and starts the ticket scheduler
"""

import asyncio
import pkgutil
import sys
from typing import List, Optional

import discord
from discord.ext import commands

from .. import cogs
from ..core.config import Config
from ..core.database import BLACKLIST_COLLECTION, TICKETS_COLLECTION, DatabaseManager
from ..core.logger import LoggerMixin
from ..database.repositories import BlacklistRepository, TicketRepository
from ..services.blacklist import BlacklistCleaner
from ..services.discord_adapters import DiscordActivityOracle, DiscordChannelPublisher, DiscordTicketActions
from ..services.error_reporter import ErrorReporter
from ..services.lifecycle import LifecycleSweeper
from ..services.scheduler import TicketScheduler
from ..services.stats import StatsUpdater
from ..utils.time import now_seconds


# Modules in the cogs package that are not extensions
NON_EXTENSION_MODULES = {'base'}


class TicketKeeperBot(commands.Bot, LoggerMixin):
    """Main Discord bot class."""

    def __init__(self, config: Config, database: DatabaseManager):
        intents = discord.Intents.default()
        intents.message_content = True
        intents.guilds = True
        intents.members = True
        intents.guild_messages = True

        super().__init__(
            command_prefix=commands.when_mentioned,
            intents=intents,
            help_command=None
        )

        self.config = config
        self.database = database
        self.started_at = now_seconds()
        self.reporter = ErrorReporter(self, config.error_log_channel_id)

        self.ticket_store: Optional[TicketRepository] = None
        self.blacklist_store: Optional[BlacklistRepository] = None
        self.ticket_actions: Optional[DiscordTicketActions] = None
        self.ticket_scheduler: Optional[TicketScheduler] = None

    def build_services(self) -> None:
        """Wire the stores, Discord adapters and periodic services together."""
        self.ticket_store = TicketRepository(self.database.get_collection(TICKETS_COLLECTION))
        self.blacklist_store = BlacklistRepository(self.database.get_collection(BLACKLIST_COLLECTION))
        self.ticket_actions = DiscordTicketActions(self, self.ticket_store)

        sweeper = LifecycleSweeper(
            self.ticket_store,
            DiscordActivityOracle(self),
            self.ticket_actions,
            auto_close_threshold=self.config.auto_close.threshold_seconds,
            auto_delete_threshold=self.config.auto_delete.threshold_seconds,
        )
        stats_updater = StatsUpdater(self.ticket_store, DiscordChannelPublisher(self), self.config.stats_channels)

        self.ticket_scheduler = TicketScheduler(
            self.config,
            sweeper,
            BlacklistCleaner(self.blacklist_store),
            stats_updater=stats_updater,
            reporter=self.reporter,
        )

    async def setup_hook(self):
        """Called when the bot is starting up."""
        self.logger.info("Setting up bot...")

        asyncio.get_running_loop().set_exception_handler(self._handle_loop_exception)
        self.build_services()
        await self.load_cogs()
        await self.sync_commands()
        self.ticket_scheduler.start()

        self.logger.info("Bot setup completed successfully")

    def extension_names(self) -> List[str]:
        """Extensions to load: every cog module not disabled in the configuration."""
        names = []
        for module in pkgutil.iter_modules(cogs.__path__):
            if module.name in NON_EXTENSION_MODULES or module.name.startswith('_'):
                continue
            if module.name in self.config.disabled_cogs:
                self.logger.info(f"Skipping disabled cog: {module.name}")
                continue
            names.append(module.name)
        return sorted(names)

    async def load_cogs(self):
        """Load all bot cogs."""
        for name in self.extension_names():
            try:
                await self.load_extension(f'{cogs.__name__}.{name}')
            except commands.ExtensionError as e:
                self.logger.error(f"Failed to load cog {name}: {e}")
                continue
            if not self.config.silent_startup:
                self.logger.info(f"Loaded cog: {name}")

    async def sync_commands(self):
        """Sync slash commands, to one guild when configured (instant) or globally."""
        try:
            if self.config.guild_id:
                guild = discord.Object(id=self.config.guild_id)
                self.tree.copy_global_to(guild=guild)
                synced = await self.tree.sync(guild=guild)
            else:
                synced = await self.tree.sync()
            self.logger.info(f"Synced {len(synced)} slash commands")
        except discord.HTTPException as e:
            self.logger.error(f"Error syncing slash commands: {e}")

    async def on_ready(self):
        """Called when the bot is ready."""
        self.logger.info(f"Bot is ready! Logged in as {self.user} (ID: {self.user.id})")
        self.logger.info(f"Bot is in {len(self.guilds)} guilds")
        await self.change_presence(
            activity=discord.Activity(type=discord.ActivityType.watching, name="for tickets")
        )

    async def on_error(self, event_method: str, *args, **kwargs):
        """Gateway event handlers that raise are reported and the bot keeps running."""
        error = sys.exc_info()[1]
        if error is None:
            self.logger.error(f"Unknown error in event {event_method}")
            return
        await self.reporter.report("ERROR", error)

    def _handle_loop_exception(self, loop: asyncio.AbstractEventLoop, context: dict):
        error = context.get("exception")
        if error is None:
            self.logger.error(f"Unhandled event loop error: {context.get('message')}")
            return
        loop.create_task(self.reporter.report("UNHANDLED_EXCEPTION", error))

    async def close(self):
        """Called when the bot is shutting down."""
        self.logger.info("Shutting down bot...")
        if self.ticket_scheduler:
            self.ticket_scheduler.shutdown()
        await super().close()
        self.logger.info("Bot shutdown completed")
