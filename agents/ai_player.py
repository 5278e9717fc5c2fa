"""
AI Player Agent — plays the non-human seat.

Only the current board goes to the oracle; the move it suggests is then
submitted to the rules engine like any other move (format "bestmove"),
so the engine stays the single judge of legality.

Errors from either service propagate as ExternalServiceErrors before
anything on the session changes.
"""

import logging
from typing import Optional, Protocol

from models.game_session import GameSession, GameState
from tools.game_errors import ExternalServiceError
from tools.ports import RulesEnginePort

logger = logging.getLogger("AIPlayer")

AI_MOVE_FORMAT = "bestmove"


class MoveOracle(Protocol):
    async def best_move(self, fen: str, depth: Optional[int] = None) -> str:
        ...


class AIPlayerAgent:
    """Requests and plays moves for the AI sentinel.

    Usage:
        agent = AIPlayerAgent(ChessAIClient(), GameApiClient())
        new_state = await agent.play_turn(session)
    """

    def __init__(self, oracle: MoveOracle, rules_engine: RulesEnginePort, depth: Optional[int] = None):
        self.oracle = oracle
        self.rules_engine = rules_engine
        self.depth = depth

    async def request_move(self, session: GameSession) -> str:
        """Ask the oracle what to play from the session's current board."""
        if not session.state.board:
            raise ExternalServiceError("No board position available for the AI.")
        move = await self.oracle.best_move(session.state.board, self.depth)
        logger.info(f"[{session.session_id}] AI chose {move}")
        return move

    async def play_turn(self, session: GameSession) -> GameState:
        """Request a move and submit it. Returns the engine's new state."""
        move = await self.request_move(session)
        return await self.rules_engine.perform_move(session, move, AI_MOVE_FORMAT)
