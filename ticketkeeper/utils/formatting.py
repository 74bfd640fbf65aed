import discord


def create_embed(description, color, title=None, footer=None):
    """Create a Discord embed with the specified description, color, and optional title and footer."""
    embed = discord.Embed(description=description, colour=color)
    if title:
        embed.title = title
    if footer:
        embed.set_footer(text=footer)
    return embed


def truncate(text: str, limit: int) -> str:
    """Trim text to the limit, keeping the end where tracebacks carry the error."""
    if len(text) <= limit:
        return text
    return "..." + text[-(limit - 3):]
