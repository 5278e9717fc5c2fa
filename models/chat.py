"""
Inbound chat event schema.

Built by tools/chat_events.py from a platform message; everything the
core needs to know about who said what, where.
"""

from typing import List, Optional
from pydantic import BaseModel, Field

from models.participant import Participant


class ChatEvent(BaseModel):
    """A message addressed to the bot."""

    tenant_id: str
    conversation_id: str
    sender: Participant
    message_id: Optional[str] = None
    mentions: List[Participant] = []
    tokens: List[str] = Field(default_factory=list)
