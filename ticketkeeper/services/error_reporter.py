"""
Error reporting to the log and to a Discord channel.

Used for faults nothing else handles: gateway errors, unhandled task
exceptions, failed scheduled passes and fatal startup errors.
"""

import traceback
from typing import Optional

import discord

from ..core.logger import LoggerMixin
from ..utils.formatting import create_embed, truncate


class ErrorReporter(LoggerMixin):
    """Logs an error and, when possible, posts it to the error channel."""

    def __init__(self, bot: Optional[discord.Client] = None, channel_id: Optional[int] = None):
        self.bot = bot
        self.channel_id = channel_id

    def _format(self, error: BaseException) -> str:
        return "".join(traceback.format_exception(type(error), error, error.__traceback__))

    async def _resolve_channel(self):
        # Posting needs a logged-in client
        if self.bot is None or not self.channel_id or self.bot.is_closed() or self.bot.user is None:
            return None
        channel = self.bot.get_channel(self.channel_id)
        if channel is None:
            channel = await self.bot.fetch_channel(self.channel_id)
        return channel

    async def report(self, kind: str, error: BaseException) -> None:
        """Report an error of the given kind (``ERROR``, ``INVALID_TOKEN``...).

        Never raises; a failure to post is only logged.
        """
        details = self._format(error)
        self.logger.error(f"[{kind}] {type(error).__name__}: {error}\n{details}")

        try:
            channel = await self._resolve_channel()
            if channel is None:
                return
            embed = create_embed(
                description=f"```py\n{truncate(details, 3900)}\n```",
                color=discord.Color.red(),
                title=f"{kind}: {type(error).__name__}",
            )
            await channel.send(embed=embed)
        except Exception as post_error:
            self.logger.warning(f"Could not post error report to channel {self.channel_id}: {post_error}")
