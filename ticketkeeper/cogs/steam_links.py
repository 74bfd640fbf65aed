"""Replies to Steam profile links with the Steam64 ids they point to."""
from typing import List

import discord
from discord.ext import commands

from .base import BaseCog
from ..utils.external.steam import SteamResolver, find_steam_links


class SteamLinks(BaseCog):
    """Resolves every Steam community link posted in chat."""

    def __init__(self, bot: commands.Bot, resolver: SteamResolver):
        super().__init__(bot)
        self.resolver = resolver

    async def build_reply(self, links: List[str]) -> List[str]:
        """One reply line per link, in the order the links were posted."""
        lines = []
        for link in links:
            try:
                steam64 = await self.resolver.extract_steam64_id(link)
            except Exception as e:
                self.logger.error(f"Error resolving {link}: {e}")
                lines.append(f"⚠️ **{link}** → An error occurred while processing that link.")
                continue

            if steam64:
                lines.append(steam64)
            else:
                lines.append(f"❌ **{link}** → Could not extract a valid Steam64 ID.")
        return lines

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message):
        if message.author.bot:
            return

        links = find_steam_links(message.content)
        if not links:
            return

        lines = await self.build_reply(links)
        if lines:
            await message.reply("\n".join(lines))


async def setup(bot):
    config = bot.config
    if not config.steam_links.enabled:
        bot.logger.info("Steam link resolution disabled")
        return
    resolver = SteamResolver(config.steam_api_key, base_url=config.steam_links.api_url)
    await bot.add_cog(SteamLinks(bot, resolver))
