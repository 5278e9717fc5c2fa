"""
TurnCoordinator — applies moves and alternates turns between humans and AI.

Per-session state machine:

    awaiting-human-move --(sender's move)--> awaiting-human-move
                                         +--> awaiting-ai-move
                                         +--> game-over
    awaiting-ai-move    --(AI move)------> same three targets

The state itself is whatever the rules engine reports: the engine's
next_players slots decide who moves, its game_over flag ends the game.
Every applied move produces exactly one board update (edited in place
when we still know the board message).

A move chain holds the session lock from the turn check until the chain
reaches a human turn or game over, including any AI replies.

A session left waiting on the AI (the oracle failed) gets its AI turn
retried when one of its players sends a move. That move is still
rejected as out of turn.
"""

import logging
from typing import List

from models.chat import ChatEvent
from models.game_session import GameSession, GameState, SessionStatus
from models.intent import Intent
from models.participant import AI_PLAYER
from tools.game_errors import (
    AmbiguousGameError,
    ExternalServiceError,
    GameError,
    GameNotFoundError,
    NotYourTurnError,
)
from tools.lifecycle import LifecycleManager
from tools.messages import board_document, error_document, not_found_message, your_move_document
from tools.ports import AIPlayerPort, ChatPort, RulesEnginePort
from tools.session_directory import SessionDirectory

logger = logging.getLogger("TurnCoordinator")

# Upper bound on consecutive AI moves in one chain (AI vs AI games).
MAX_CHAINED_AI_MOVES = 500


class TurnCoordinator:
    def __init__(
        self,
        directory: SessionDirectory,
        rules_engine: RulesEnginePort,
        ai_player: AIPlayerPort,
        chat: ChatPort,
        lifecycle: LifecycleManager,
    ):
        self.directory = directory
        self.rules_engine = rules_engine
        self.ai_player = ai_player
        self.chat = chat
        self.lifecycle = lifecycle

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def lookup_ids(self, event: ChatEvent, intent: Intent) -> List[str]:
        """Participant ids to look the game up by: mentions, sender, maybe AI."""
        ids = [m.id for m in event.mentions]
        ids.append(event.sender.id)
        if intent.vs_ai:
            ids.append(AI_PLAYER.id)
        return ids

    def resolve(self, event: ChatEvent, intent: Intent) -> str:
        """Exactly one session id, or GameNotFoundError / AmbiguousGameError."""
        session_ids = self.directory.lookup(
            event.tenant_id, event.conversation_id, self.lookup_ids(event, intent), intent.game
        )
        if not session_ids:
            raise GameNotFoundError(not_found_message())
        if len(session_ids) > 1:
            raise AmbiguousGameError(session_ids)
        return session_ids[0]

    # ------------------------------------------------------------------
    # Human moves
    # ------------------------------------------------------------------

    async def play_move(self, event: ChatEvent, intent: Intent) -> GameSession:
        """Apply the sender's move, then run the turn chain."""
        session_id = self.resolve(event, intent)

        async with self.directory.lock(session_id):
            session = self.directory.get(session_id)
            if session is None:
                # Ended while we waited for the lock.
                raise GameNotFoundError(not_found_message())

            if session.status is SessionStatus.GAME_OVER or not session.is_next(event.sender.id):
                logger.info(f"{event.sender.id} moved out of turn in {session_id}")
                if session.status is SessionStatus.AWAITING_AI and event.sender.id in session.player_ids:
                    await self._resume_ai(event, session)
                raise NotYourTurnError()

            logger.info(f"[{session_id}] {event.sender.name or event.sender.id}: {intent.move}")
            state = await self.rules_engine.perform_move(session, intent.move, "san")
            if not await self._apply(event, session, state):
                await self.advance(event, session)
        return session

    # ------------------------------------------------------------------
    # Turn chain
    # ------------------------------------------------------------------

    async def advance(self, event: ChatEvent, session: GameSession) -> None:
        """Prompt the humans who are next, and play for the AI while it's next.

        Caller must hold the session lock.
        """
        for _ in range(MAX_CHAINED_AI_MOVES):
            if session.state.game_over:
                return
            next_players = session.next_participants()
            humans = [p for p in next_players if not p.is_ai]
            if humans:
                await self.chat.notify(event, humans, your_move_document(humans))
            if session.status is not SessionStatus.AWAITING_AI:
                if not next_players:
                    logger.warning(f"[{session.session_id}] engine reported no next players")
                return

            logger.info(f"[{session.session_id}] AI to move")
            state = await self.ai_player.play_turn(session)
            if await self._apply(event, session, state):
                return
        logger.error(f"[{session.session_id}] AI chain exceeded {MAX_CHAINED_AI_MOVES} moves")
        raise GameError(
            f"The AI made {MAX_CHAINED_AI_MOVES} moves in a row without reaching a human turn; stopping."
        )

    async def _resume_ai(self, event: ChatEvent, session: GameSession) -> None:
        """Retry a stalled AI turn. A failure is reported and the chain left as is."""
        logger.info(f"[{session.session_id}] retrying stalled AI turn for {event.sender.id}")
        try:
            await self.advance(event, session)
        except ExternalServiceError as e:
            logger.warning(f"[{session.session_id}] AI retry failed: {e}")
            await self.chat.post(event, error_document(e.emoji, e.user_message))

    async def _apply(self, event: ChatEvent, session: GameSession, state: GameState) -> bool:
        """Store the new state and show the board. Returns True if the game ended.

        A finished game is removed even when showing the board fails.
        """
        session.state = state
        try:
            await self._show_board(event, session)
        finally:
            if state.game_over:
                await self.lifecycle.end_session(event, session)
        return state.game_over

    async def _show_board(self, event: ChatEvent, session: GameSession) -> None:
        document = board_document(session)
        if session.message_ref:
            session.message_ref = await self.chat.update(event, session.message_ref, document)
        else:
            session.message_ref = await self.chat.post(event, document)
