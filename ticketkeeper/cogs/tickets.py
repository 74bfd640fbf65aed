"""
Manual ticket lifecycle commands
"""
from typing import Optional

import discord
from discord import app_commands

from .base import BaseCog
from ..core.exceptions import TicketActionError
from ..utils.formatting import create_embed


def _reply(description: str, color: discord.Color, title: Optional[str] = None) -> discord.Embed:
    return create_embed(description=description, color=color, title=title)


class Tickets(BaseCog):
    """
    Close and delete ticket channels by hand
    """

    async def _ticket_for(self, interaction: discord.Interaction):
        ticket = await self.ticket_store.get(str(interaction.channel_id))
        if ticket is None:
            await interaction.response.send_message(
                embed=_reply("This channel is not a ticket.", discord.Color.red()),
                ephemeral=True
            )
        return ticket

    @app_commands.command(name="close", description="Close the ticket in this channel")
    @app_commands.describe(reason="Why the ticket is being closed")
    @app_commands.guild_only()
    async def close(self, interaction: discord.Interaction, reason: Optional[str] = None):
        """Close the current ticket; its owner or staff may do this."""
        ticket = await self._ticket_for(interaction)
        if ticket is None:
            return

        is_owner = ticket.ownerId == str(interaction.user.id)
        is_staff = interaction.user.guild_permissions.manage_channels
        if not (is_owner or is_staff):
            await interaction.response.send_message(
                embed=_reply("Only the ticket owner or staff can close this ticket.", discord.Color.red()),
                ephemeral=True
            )
            return

        if ticket.is_closed:
            await interaction.response.send_message(
                embed=_reply("This ticket is already closed.", discord.Color.orange()),
                ephemeral=True
            )
            return

        await interaction.response.defer(ephemeral=True)
        try:
            await self.ticket_actions.close(
                str(interaction.channel_id),
                closed_by=interaction.user,
                reason=reason or f"Closed by {interaction.user}"
            )
        except TicketActionError as e:
            self.logger.error(f"Manual close failed: {e}")
            await interaction.followup.send(
                embed=_reply("The ticket was closed, but the channel could not be updated.", discord.Color.orange()),
                ephemeral=True
            )
            return

        await interaction.followup.send(embed=_reply("Ticket closed.", discord.Color.green()), ephemeral=True)

    @app_commands.command(name="delete", description="Delete the ticket in this channel")
    @app_commands.default_permissions(manage_channels=True)
    @app_commands.checks.has_permissions(manage_channels=True)
    @app_commands.guild_only()
    async def delete(self, interaction: discord.Interaction):
        """Delete the current ticket channel and its record."""
        ticket = await self._ticket_for(interaction)
        if ticket is None:
            return

        await interaction.response.send_message(
            embed=_reply("Deleting this ticket...", discord.Color.orange()),
            ephemeral=True
        )
        try:
            await self.ticket_actions.delete(str(interaction.channel_id), reason=f"Deleted by {interaction.user}")
        except TicketActionError as e:
            self.logger.error(f"Manual delete failed: {e}")
            await interaction.followup.send(
                embed=_reply("The ticket channel could not be deleted.", discord.Color.red()),
                ephemeral=True
            )

    async def cog_app_command_error(self, interaction: discord.Interaction,
                                    error: app_commands.AppCommandError):
        if isinstance(error, app_commands.MissingPermissions):
            message = "You lack the required permissions to use this command."
        else:
            self.logger.error(f"Ticket command error: {error}", exc_info=error)
            message = "An error occurred while running this command."

        embed = _reply(message, discord.Color.red())
        if interaction.response.is_done():
            await interaction.followup.send(embed=embed, ephemeral=True)
        else:
            await interaction.response.send_message(embed=embed, ephemeral=True)


async def setup(bot):
    await bot.add_cog(Tickets(bot))
