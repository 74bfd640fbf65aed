"""
Base cog class for ticketkeeper
Gives cogs access to the services the bot owns
"""

from discord.ext import commands

from ..core.logger import LoggerMixin


class BaseCog(commands.Cog, LoggerMixin):
    """Base cog class with access to the bot's services."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @property
    def config(self):
        return self.bot.config

    @property
    def ticket_store(self):
        return self.bot.ticket_store

    @property
    def ticket_actions(self):
        return self.bot.ticket_actions

    async def cog_load(self):
        """Called when the cog is loaded."""
        self.logger.debug(f"{self.__class__.__name__} cog loaded")

    async def cog_unload(self):
        """Called when the cog is unloaded."""
        self.logger.debug(f"{self.__class__.__name__} cog unloaded")
