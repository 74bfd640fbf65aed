from .steam import SteamResolver, find_steam_links

__all__ = ['SteamResolver', 'find_steam_links']
