"""
Tabletop Bot — Discord Bot Client

Core bot setup, event handling and message routing. Mention the bot with
a game command ("@Tabletop play chess with @someone", "@Tabletop e4")
and the message is turned into a ChatEvent and handed to the GameTable.
The !commands live in Cogs (bot/cogs/).

All game state is in memory; restarting the bot ends every game.
"""

import os
import asyncio
import logging
from collections import deque
import discord
from discord.ext import commands
from dotenv import load_dotenv

from agents.ai_player import AIPlayerAgent
from agents.tools.chess_ai import ChessAIClient
from agents.tools.game_api import GameApiClient
from bot.discord_chat import DiscordChat
from bot.render import render
from tools.chat_events import event_from_message
from tools.game_table import GameTable
from tools.messages import welcome_document
from tools.session_directory import SessionDirectory

logger = logging.getLogger("Tabletop_Bot")

# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------
load_dotenv()
DISCORD_TOKEN = os.getenv("DISCORD_BOT_TOKEN")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
if not os.path.exists("logs"):
    os.makedirs("logs")

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[
        logging.FileHandler("logs/tabletop_bot.log", encoding="utf-8"),
        logging.StreamHandler(),
    ],
)

# ---------------------------------------------------------------------------
# Discord Bot Instance
# ---------------------------------------------------------------------------
intents = discord.Intents.default()
intents.message_content = True
bot = commands.Bot(command_prefix="!", intents=intents, help_command=None)

# ---------------------------------------------------------------------------
# Game services (rules engine, AI oracle) and the in-memory session directory
# ---------------------------------------------------------------------------
game_api = GameApiClient()
chess_ai = ChessAIClient()
ai_player = AIPlayerAgent(chess_ai, game_api)
session_directory = SessionDirectory()
chat = DiscordChat(bot)
game_table = GameTable(session_directory, game_api, ai_player, chat)

# ---------------------------------------------------------------------------
# Reliability: Message deduplication
# ---------------------------------------------------------------------------
_seen_messages: deque = deque(maxlen=1000)  # Bounded deque of recent message IDs

def _mentions_bot(message: discord.Message) -> bool:
    return bot.user is not None and any(u.id == bot.user.id for u in message.mentions)

# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------
@bot.event
async def on_ready():
    logger.info(f"Logged in as {bot.user} (id={bot.user.id if bot.user else '?'})")
    logger.info(f"Connected to {len(bot.guilds)} guild(s)")

@bot.event
async def on_guild_join(guild: discord.Guild):
    """Say hello in the server's system channel when the bot is added."""
    logger.info(f"Joined guild {guild.name} ({guild.id})")
    channel = guild.system_channel
    if channel is None:
        return
    try:
        await channel.send(render(welcome_document()))
    except discord.HTTPException as e:
        logger.warning(f"Could not post welcome message in {guild.id}: {e}")

@bot.event
async def on_message(message: discord.Message):
    if message.author.bot:
        return

    if message.id in _seen_messages:
        logger.debug(f"Duplicate message {message.id} ignored")
        return
    _seen_messages.append(message.id)

    if message.content.startswith(bot.command_prefix):
        await bot.process_commands(message)
        return

    if not _mentions_bot(message):
        return

    event = event_from_message(message, bot.user.id)
    async with message.channel.typing():
        await game_table.handle_event(event)

# ---------------------------------------------------------------------------
# Cog Loading & Entry Point
# ---------------------------------------------------------------------------
async def load_cogs():
    """Load all Cog extensions."""
    await bot.load_extension("bot.cogs.games_cog")
    logger.info("All Cogs loaded.")

async def main():
    """Async entry point — load cogs then start the bot."""
    try:
        async with bot:
            await load_cogs()
            await bot.start(DISCORD_TOKEN)
    finally:
        await game_api.close()
        await chess_ai.close()

def run():
    """Synchronous entry point for scripts."""
    if not DISCORD_TOKEN:
        print("Error: DISCORD_BOT_TOKEN not found via os.getenv")
        return
    asyncio.run(main())
