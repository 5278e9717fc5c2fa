"""
Games Cog — prefix commands next to the mention-driven game flow.

Commands:
  !games     — list your active games in this channel
  !chesshelp — show how to talk to the bot
"""

import logging
from discord.ext import commands

from bot.render import render
from tools.chat_events import event_from_message
from tools.messages import games_list_document, usage_document

logger = logging.getLogger("Games_Cog")


class GamesCog(commands.Cog, name="Games"):
    """Read-only views over the session directory."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot
        from bot.client import game_table
        self.game_table = game_table

    @commands.command(name="games")
    async def games_cmd(self, ctx: commands.Context):
        """List the games you are playing in this channel."""
        event = event_from_message(ctx.message, self.bot.user.id if self.bot.user else None)
        sessions = self.game_table.active_games(event)
        logger.info(f"!games for {event.sender.id}: {len(sessions)} session(s)")
        await ctx.send(render(games_list_document(sessions)))

    @commands.command(name="chesshelp")
    async def help_cmd(self, ctx: commands.Context):
        """How to start a game and make moves."""
        await ctx.send(render(usage_document()))


async def setup(bot: commands.Bot):
    await bot.add_cog(GamesCog(bot))
