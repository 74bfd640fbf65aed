"""
Discord-backed implementations of the service collaborators.
"""

from typing import Optional

import discord

from .base import ActivityOracle, ChannelPublisher, TicketActions, TicketStore
from ..core.exceptions import TicketActionError
from ..core.logger import LoggerMixin
from ..database.models import TicketStatus
from ..utils.formatting import create_embed
from ..utils.time import datetime_to_seconds, now_ms


class ChannelLookup(LoggerMixin):
    """Resolves channel ids through the cache first, then the API."""

    def __init__(self, bot: discord.Client):
        self.bot = bot

    async def get_channel(self, channel_id):
        channel_id = int(channel_id)
        channel = self.bot.get_channel(channel_id)
        if channel is not None:
            return channel
        try:
            return await self.bot.fetch_channel(channel_id)
        except discord.NotFound:
            self.logger.debug(f"Channel {channel_id} no longer exists")
            return None


class DiscordActivityOracle(ChannelLookup, ActivityOracle):
    """Reads the newest message of a ticket channel."""

    async def last_message_timestamp(self, channel_id: str) -> Optional[int]:
        channel = await self.get_channel(channel_id)
        if channel is None or not hasattr(channel, 'history'):
            return None

        async for message in channel.history(limit=1):
            return datetime_to_seconds(message.created_at)
        return None


class DiscordTicketActions(ChannelLookup, TicketActions):
    """Closes and deletes ticket channels and their records."""

    def __init__(self, bot: discord.Client, store: TicketStore):
        super().__init__(bot)
        self.store = store

    async def close(self, channel_id: str, closed_by: Optional[discord.abc.User] = None,
                    reason: Optional[str] = None) -> bool:
        """Close a ticket. Closing an unknown or already closed ticket does nothing.

        Returns:
            True if the ticket was closed by this call
        """
        ticket = await self.store.get(channel_id)
        if ticket is None or ticket.is_closed:
            self.logger.debug(f"Ticket {channel_id} is not open, nothing to close")
            return False

        reason = reason or "Closed automatically due to inactivity"
        await self.store.update(channel_id, {
            'status': TicketStatus.CLOSED.value,
            'closedAt': now_ms(),
            'closedBy': str(closed_by.id) if closed_by else "auto",
            'closeReason': reason,
        })

        channel = await self.get_channel(channel_id)
        if channel is None:
            return True

        try:
            owner = channel.guild.get_member(int(ticket.ownerId)) if ticket.ownerId else None
            if owner is not None:
                await channel.set_permissions(owner, view_channel=True, send_messages=False)

            by = closed_by.mention if closed_by else "the system"
            embed = create_embed(
                description=f"This ticket was closed by {by}.\n**Reason:** {reason}",
                color=discord.Color.orange(),
                title="🔒 Ticket Closed",
            )
            await channel.send(embed=embed)
        except discord.HTTPException as e:
            raise TicketActionError(f"Ticket closed but the channel could not be updated: {e}", channel_id) from e

        self.logger.info(f"Closed ticket {channel_id} ({reason})")
        return True

    async def delete(self, channel_id: str, reason: Optional[str] = None) -> None:
        """Delete the ticket channel, then its record."""
        channel = await self.get_channel(channel_id)
        if channel is not None:
            try:
                await channel.delete(reason=reason or "Ticket deleted after being closed")
            except discord.NotFound:
                pass
            except discord.HTTPException as e:
                raise TicketActionError(f"Could not delete channel: {e}", channel_id) from e

        await self.store.delete(channel_id)
        self.logger.info(f"Deleted ticket {channel_id}")


class DiscordChannelPublisher(ChannelLookup, ChannelPublisher):
    """Renames display channels, skipping renames that would change nothing."""

    async def rename(self, channel_id: int, name: str) -> None:
        channel = await self.get_channel(channel_id)
        if channel is None:
            self.logger.warning(f"Stats channel {channel_id} not found")
            return
        if channel.name != name:
            await channel.edit(name=name)
