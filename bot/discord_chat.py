"""
DiscordChat — the ChatPort implementation for discord.py.

Posts, edits and notices all go to the channel the command came from.
"""

import logging
from typing import List, Optional

import discord

from bot.render import chunk, render
from models.chat import ChatEvent
from models.document import MessageDocument
from models.participant import Participant

logger = logging.getLogger("DiscordChat")


class DiscordChat:
    def __init__(self, client: discord.Client):
        self.client = client

    async def _channel(self, event: ChatEvent):
        channel_id = int(event.conversation_id)
        channel = self.client.get_channel(channel_id)
        if channel is None:
            channel = await self.client.fetch_channel(channel_id)
        return channel

    async def post(self, event: ChatEvent, document: MessageDocument) -> Optional[str]:
        channel = await self._channel(event)
        sent = None
        for piece in chunk(render(document)):
            sent = await channel.send(piece)
        return str(sent.id) if sent is not None else None

    async def update(self, event: ChatEvent, message_ref: str, document: MessageDocument) -> Optional[str]:
        """Edit the board message in place; post a fresh one if it's gone."""
        channel = await self._channel(event)
        try:
            message = await channel.fetch_message(int(message_ref))
            await message.edit(content=render(document))
            return message_ref
        except (discord.NotFound, discord.Forbidden) as e:
            logger.warning(f"Board message {message_ref} unavailable ({e}), posting a new one")
            return await self.post(event, document)

    async def notify(self, event: ChatEvent, participants: List[Participant], document: MessageDocument) -> None:
        channel = await self._channel(event)
        allowed = discord.AllowedMentions(
            users=[discord.Object(id=int(p.platform_id)) for p in participants if p.platform_id.isdigit()],
        )
        await channel.send(render(document), allowed_mentions=allowed)
