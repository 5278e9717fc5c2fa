"""
Pydantic v2 data models — the contract between the chat binding, the
turn engine and the remote rules engine.

Everything that crosses a component boundary is one of these.
"""

from models.participant import AI_PLAYER, AI_PLAYER_ID, Participant, escape_id
from models.game_session import CreatedGame, GameSession, GameState, SessionStatus
from models.intent import Intent
from models.chat import ChatEvent
from models.document import Block, MessageDocument, Run

__all__ = [
    "AI_PLAYER",
    "AI_PLAYER_ID",
    "Participant",
    "escape_id",
    "CreatedGame",
    "GameSession",
    "GameState",
    "SessionStatus",
    "Intent",
    "ChatEvent",
    "Block",
    "MessageDocument",
    "Run",
]
