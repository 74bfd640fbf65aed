"""
Application manager for ticketkeeper
Owns the configuration, database and bot for the lifetime of the process
"""

from typing import Optional

import discord

from .config import Config, load_config
from .database import DatabaseManager
from .exceptions import StartupError
from .logger import LoggerMixin, setup_logging


def classify_login_error(error: BaseException) -> str:
    """Map a login failure to the kind reported before exiting."""
    if isinstance(error, discord.PrivilegedIntentsRequired):
        return "DISALLOWED_INTENTS"
    if isinstance(error, discord.LoginFailure):
        return "INVALID_TOKEN"
    return "ERROR"


class ApplicationManager(LoggerMixin):
    """Starts and stops every service of the bot."""

    def __init__(self, config: Optional[Config] = None):
        self.config = config
        self.db_manager: Optional[DatabaseManager] = None
        self.bot = None
        self._initialized = False

    async def initialize(self, mode: str = "production", config_path: str = "config.yml") -> None:
        """Load configuration, configure logging and connect the database."""
        if self._initialized:
            return

        if self.config is None:
            environment = 'development' if mode == 'dev' else 'production'
            self.config = load_config(config_path, environment=environment)
        if self.config.is_development:
            self.config.logging.level = 'DEBUG'

        setup_logging(self.config.logging)
        self.logger.info(f"Initializing ticketkeeper in {self.config.environment} mode")

        try:
            self.db_manager = DatabaseManager(self.config.database)
            await self.db_manager.connect()
            await self.db_manager.create_indexes()

            from ..bot.client import TicketKeeperBot
            self.bot = TicketKeeperBot(self.config, self.db_manager)
        except Exception as e:
            self.logger.error(f"Failed to initialize application: {e}")
            await self.shutdown()
            raise

        self._initialized = True
        self.logger.info("Application initialization completed successfully")

    async def run(self) -> None:
        """Log in and run until the bot disconnects.

        Raises:
            StartupError: the bot could not log in
        """
        if not self._initialized:
            await self.initialize()

        token = self.config.discord_token
        if not token:
            error = StartupError("No Discord token configured (set DISCORD_TOKEN)", "INVALID_TOKEN")
            await self.bot.reporter.report(error.kind, error)
            raise error

        try:
            async with self.bot:
                await self.bot.start(token)
        except (discord.LoginFailure, discord.PrivilegedIntentsRequired) as e:
            kind = classify_login_error(e)
            await self.bot.reporter.report(kind, e)
            raise StartupError(str(e), kind) from e
        except Exception as e:
            if self.bot.is_ready():
                raise
            await self.bot.reporter.report("ERROR", e)
            raise StartupError(str(e), "ERROR") from e
        finally:
            await self.shutdown()

    async def shutdown(self) -> None:
        """Shutdown all services gracefully."""
        if self.bot and not self.bot.is_closed():
            await self.bot.close()
        if self.db_manager:
            await self.db_manager.disconnect()
        self._initialized = False
