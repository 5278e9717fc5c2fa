"""
Intent schema — the structured result of parsing a chat command.
"""

from typing import Literal, Optional
from pydantic import BaseModel

from models.participant import Participant


class Intent(BaseModel):
    """What the sender asked for.

    `opponent` is the mentioned human for a start, the AI sentinel for
    AI starts and AI-hinted moves, and None otherwise.
    """

    action: Literal["start", "move"]
    game: str
    opponent: Optional[Participant] = None
    move: Optional[str] = None

    model_config = {"frozen": True}

    @property
    def vs_ai(self) -> bool:
        return self.opponent is not None and self.opponent.is_ai
