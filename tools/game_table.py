"""
GameTable — entry point for one chat command addressed to the bot.

Flow: interpret the tokens -> start a session or play a move -> chain
turns. Whatever goes wrong ends up as exactly one notice in the
conversation; GameError subclasses carry their own wording, anything
else is logged with a traceback and reported generically. A failure in
one event never stops the bot from handling the next.
"""

import logging
import random
from typing import List, Optional

from models.chat import ChatEvent
from models.game_session import GameSession
from models.intent import Intent
from tools.command_parser import interpret_command
from tools.game_errors import GameError, GameValidationError, UnsupportedGameError
from tools.lifecycle import LifecycleManager
from tools.messages import error_document, usage_document
from tools.ports import AIPlayerPort, ChatPort, RulesEnginePort
from tools.session_directory import SessionDirectory
from tools.turn_coordinator import TurnCoordinator

logger = logging.getLogger("GameTable")


class GameTable:
    """Wires directory, lifecycle and coordinator together.

    Usage:
        table = GameTable(SessionDirectory(), rules_engine, ai_player, chat)
        await table.handle_event(event)
    """

    def __init__(
        self,
        directory: SessionDirectory,
        rules_engine: RulesEnginePort,
        ai_player: AIPlayerPort,
        chat: ChatPort,
        rng: Optional[random.Random] = None,
    ):
        self.directory = directory
        self.chat = chat
        self.lifecycle = LifecycleManager(directory, rules_engine, chat, rng=rng)
        self.coordinator = TurnCoordinator(
            directory, rules_engine, ai_player, chat, self.lifecycle
        )

    async def handle_event(self, event: ChatEvent) -> None:
        logger.info(
            f"[{event.conversation_id}] {event.sender.name or event.sender.id}: "
            f"{' '.join(event.tokens)} (mentions: {[m.id for m in event.mentions]})"
        )
        try:
            try:
                intent = interpret_command(event.tokens, event.mentions)
            except UnsupportedGameError as e:
                await self.chat.post(event, usage_document(prefix=e.user_message))
                return

            if intent is None:
                await self.chat.post(event, usage_document())
            elif intent.action == "start":
                await self.start_game(event, intent)
            else:
                await self.coordinator.play_move(event, intent)

        except GameValidationError as e:
            logger.error(f"Rejected command from {event.sender.id}: {e}")
            await self._send_notice(event, e.emoji, e.user_message)
        except GameError as e:
            logger.info(f"{type(e).__name__} for {event.sender.id}: {e}")
            await self._send_notice(event, e.emoji, e.user_message)
        except Exception as e:
            logger.error(f"Error processing command: {e}", exc_info=True)
            await self._send_notice(event, ":warning:", "Something went wrong processing that.")

    async def start_game(self, event: ChatEvent, intent: Intent) -> GameSession:
        session = await self.lifecycle.start_session(event, intent)
        async with self.directory.lock(session.session_id):
            if session.session_id in self.directory:
                await self.coordinator.advance(event, session)
        return session

    def active_games(self, event: ChatEvent) -> List[GameSession]:
        """The sender's live sessions in this conversation."""
        return self.directory.sessions_for(event.tenant_id, event.conversation_id, event.sender.id)

    async def _send_notice(self, event: ChatEvent, emoji: str, message: str) -> None:
        try:
            await self.chat.post(event, error_document(emoji, message))
        except Exception as e:
            logger.error(f"Failed to deliver notice '{message}': {e}", exc_info=True)
