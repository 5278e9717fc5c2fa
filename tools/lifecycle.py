"""
LifecycleManager — the only place sessions are created and destroyed.

A start succeeds only when the directory has no session for the same
(tenant, conversation, players, game); that check and the insert run
under a lock on the index key, so two starts racing for the same pair
can't both get through while the engine call is in flight.
"""

import logging
import random
from typing import Optional

from models.chat import ChatEvent
from models.game_session import GameSession
from models.intent import Intent
from tools.game_errors import GameAlreadyExistsError, GameValidationError
from tools.messages import board_document, game_over_document
from tools.ports import ChatPort, RulesEnginePort
from tools.session_directory import IndexKey, SessionDirectory, player_signature

logger = logging.getLogger("Lifecycle")


class LifecycleManager:
    def __init__(
        self,
        directory: SessionDirectory,
        rules_engine: RulesEnginePort,
        chat: ChatPort,
        rng: Optional[random.Random] = None,
    ):
        self.directory = directory
        self.rules_engine = rules_engine
        self.chat = chat
        self._rng = rng or random.Random()

    async def start_session(self, event: ChatEvent, intent: Intent) -> GameSession:
        """Create a game between the sender and the intent's opponent.

        Seats are shuffled so neither side always gets the first move.
        Posts the opening board and registers the session; the caller
        advances it (the AI may be first to move).
        """
        opponent = intent.opponent
        if opponent is None:
            raise GameValidationError("No opponent specified.")
        if opponent.id == event.sender.id:
            raise GameValidationError("You can't play against yourself.")

        players = [opponent, event.sender]
        player_ids = [p.id for p in players]
        start_key = IndexKey(
            event.tenant_id, event.conversation_id, player_signature(player_ids), intent.game
        )

        async with self.directory.locks.hold(start_key):
            existing = self.directory.lookup(
                event.tenant_id, event.conversation_id, player_ids, intent.game
            )
            if existing:
                logger.info(f"Start blocked, {start_key} already has {existing}")
                raise GameAlreadyExistsError()

            self._rng.shuffle(players)
            created = await self.rules_engine.create_game(
                [p.to_contact() for p in players], intent.game
            )

            session = GameSession(
                session_id=created.session_id,
                tenant_id=event.tenant_id,
                conversation_id=event.conversation_id,
                game=intent.game,
                players=created.players if len(created.players) == len(players) else players,
                state=created.state,
            )
            session.message_ref = await self.chat.post(event, board_document(session))
            self.directory.insert(
                event.tenant_id, event.conversation_id, session.player_ids, intent.game, session
            )

        logger.info(
            f"Started {intent.game} session {session.session_id}: "
            f"{' vs '.join(p.name or p.id for p in session.players)}"
        )
        return session

    async def end_session(self, event: ChatEvent, session: GameSession) -> None:
        """Drop every trace of a finished game and announce the result."""
        self.directory.remove(
            session.tenant_id,
            session.conversation_id,
            session.player_ids,
            session.game,
            session.session_id,
        )
        logger.info(f"Session {session.session_id} over: {session.state.message}")
        await self.chat.post(event, game_over_document(session))
