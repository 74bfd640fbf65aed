import asyncio
import logging
import re
from typing import List, Optional

import aiohttp

logger = logging.getLogger('steam')

# Profile links carry the Steam64 id, vanity links need resolving
STEAM_LINK_PATTERN = re.compile(
    r"https?://steamcommunity\.com/(profiles/\d+|id/[a-zA-Z0-9_-]+)"
)
STEAM_PATH_PATTERN = re.compile(
    r"steamcommunity\.com/(profiles|id)/([a-zA-Z0-9_-]+)", re.IGNORECASE
)


def find_steam_links(text: str) -> List[str]:
    """Return every Steam community profile link in the text, in order."""
    return [match.group(0) for match in STEAM_LINK_PATTERN.finditer(text or "")]


class SteamResolver:
    """
    Turns Steam community profile links into Steam64 ids
    """

    def __init__(self, api_key: Optional[str], base_url: str = "https://api.steampowered.com",
                 session: Optional[aiohttp.ClientSession] = None):
        self.api_key = api_key
        self.base_url = base_url.rstrip('/')
        self.session = session

    async def resolve_vanity_url(self, vanity: str) -> Optional[str]:
        """
        Convert a Steam vanity name to a Steam ID

        Args:
            vanity: The vanity name (e.g. 'gabelogannewell' from 'steamcommunity.com/id/gabelogannewell')

        Returns:
            Steam ID as string or None if not found
        """
        if not self.api_key:
            logger.warning("Steam API key not configured")
            return None

        url = f"{self.base_url}/ISteamUser/ResolveVanityURL/v1/"
        params = {
            "key": self.api_key,
            "vanityurl": vanity
        }

        try:
            if self.session is not None:
                return await self._fetch_steam_id(self.session, url, params)
            async with aiohttp.ClientSession() as session:
                return await self._fetch_steam_id(session, url, params)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.error(f"Error resolving Steam vanity URL '{vanity}': {e}")
            return None

    async def _fetch_steam_id(self, session, url: str, params: dict) -> Optional[str]:
        async with session.get(url, params=params) as response:
            if response.status != 200:
                logger.warning(f"Steam API answered {response.status} for vanity '{params['vanityurl']}'")
                return None
            data = await response.json()

        result = (data or {}).get("response", {})
        if result.get("success") == 1:
            return result.get("steamid")
        return None

    async def extract_steam64_id(self, url: str) -> Optional[str]:
        """
        Extract or resolve a Steam64 ID from a Steam Community URL

        Supports both /profiles/<id> and /id/<vanity> links.
        """
        match = STEAM_PATH_PATTERN.search(url or "")
        if not match:
            return None

        kind, value = match.group(1).lower(), match.group(2)
        if kind == "profiles":
            return value
        return await self.resolve_vanity_url(value)
