"""
Collaborator ports — what the turn engine needs from the outside world.

The real implementations are agents/tools/game_api.py (rules engine),
agents/ai_player.py (AI moves) and bot/discord_chat.py (chat). Tests
plug in in-memory fakes.
"""

from typing import List, Optional, Protocol, Sequence

from models.chat import ChatEvent
from models.document import MessageDocument
from models.game_session import CreatedGame, GameSession, GameState
from models.participant import Participant


class RulesEnginePort(Protocol):
    async def create_game(self, contacts: Sequence[str], game: str = "chess") -> CreatedGame:
        ...

    async def perform_move(self, session: GameSession, move: str, move_format: str = "san") -> GameState:
        ...


class AIPlayerPort(Protocol):
    async def play_turn(self, session: GameSession) -> GameState:
        ...


class ChatPort(Protocol):
    async def post(self, event: ChatEvent, document: MessageDocument) -> Optional[str]:
        """Post a new message in the event's conversation. Returns its id."""
        ...

    async def update(self, event: ChatEvent, message_ref: str, document: MessageDocument) -> Optional[str]:
        """Replace an earlier message in place. Returns the id now showing it."""
        ...

    async def notify(self, event: ChatEvent, participants: List[Participant], document: MessageDocument) -> None:
        """Send a notice addressed to specific participants."""
        ...
