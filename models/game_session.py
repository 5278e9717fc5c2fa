"""
Game session schemas — the narrow view of rules-engine state we rely on.

The rules engine owns legality and turn order. All the bot needs from
its state blob is: is the game over, what should we tell the players,
whose turn is next (as slot indices), and the board representation.
"""

from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from models.participant import Participant


class SessionStatus(str, Enum):
    AWAITING_HUMAN = "awaiting-human-move"
    AWAITING_AI = "awaiting-ai-move"
    GAME_OVER = "game-over"


class GameState(BaseModel):
    """One version of the engine's game state."""

    version: int = Field(default=0, ge=0)
    game_over: bool = False
    message: str = ""
    next_players: List[int] = []
    board: str = ""

    @classmethod
    def from_api(cls, game_state: Dict[str, Any]) -> "GameState":
        """Build from the engine's `game_state` JSON object.

        Shape: {"version": 3, "state": {"game_over": false, "message": "...",
                "next_players": [1], "fen": "..."}}
        """
        state = game_state.get("state") or {}
        return cls(
            version=game_state.get("version", 0),
            game_over=bool(state.get("game_over", False)),
            message=state.get("message") or "",
            next_players=list(state.get("next_players") or []),
            board=state.get("fen") or state.get("board") or "",
        )


class GameSession(BaseModel):
    """An in-progress game between an ordered set of participants.

    Owned by the SessionDirectory. Only the TurnCoordinator and the
    LifecycleManager replace `state` and `message_ref`.
    """

    session_id: str
    tenant_id: str
    conversation_id: str
    game: str
    players: List[Participant]
    state: GameState = Field(default_factory=GameState)
    message_ref: Optional[str] = None

    @property
    def player_ids(self) -> List[str]:
        return [p.id for p in self.players]

    def next_participants(self) -> List[Participant]:
        """Translate the engine's next-player slots into participants."""
        result = []
        for slot in self.state.next_players:
            if 0 <= slot < len(self.players):
                result.append(self.players[slot])
        return result

    def is_next(self, participant_id: str) -> bool:
        return any(p.id == participant_id for p in self.next_participants())

    @property
    def status(self) -> SessionStatus:
        if self.state.game_over:
            return SessionStatus.GAME_OVER
        if any(p.is_ai for p in self.next_participants()):
            return SessionStatus.AWAITING_AI
        return SessionStatus.AWAITING_HUMAN


class CreatedGame(BaseModel):
    """What the rules engine hands back from create_game."""

    session_id: str
    players: List[Participant]
    state: GameState
