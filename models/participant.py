"""
Participant schema — one seat at the table, human or AI.

Participants are encoded into the rules engine as *contact* strings
(`chat:<id>:<name>`) so the engine can hand the seat list back to us.
Platform ids may contain ':' which would break the contact format, so
they are stored with ':' replaced by '~'.
"""

from typing import Optional
from pydantic import BaseModel, field_validator

CONTACT_SCHEME = "chat"
AI_PLAYER_ID = "_none"


def escape_id(raw_id) -> str:
    """Normalize a platform id into the form used in contacts and index keys."""
    return str(raw_id).replace(":", "~")


class Participant(BaseModel):
    """A human chat user or the AI sentinel, occupying one ordered slot."""

    id: str
    name: str = ""

    model_config = {"frozen": True}

    @field_validator("id", mode="before")
    @classmethod
    def normalize_id(cls, v):
        return escape_id(v)

    @property
    def is_ai(self) -> bool:
        return self.id == AI_PLAYER_ID

    @property
    def platform_id(self) -> str:
        """The id as the chat platform knows it (':' restored)."""
        return self.id.replace("~", ":")

    def to_contact(self) -> str:
        return f"{CONTACT_SCHEME}:{self.id}:{self.name}"

    @classmethod
    def from_contact(cls, contact: str) -> Optional["Participant"]:
        """Decode a contact string. Returns None for foreign schemes."""
        parts = contact.split(":", 2)
        if len(parts) < 2 or parts[0] != CONTACT_SCHEME or not parts[1]:
            return None
        name = parts[2] if len(parts) == 3 else ""
        return cls(id=parts[1], name=name)


AI_PLAYER = Participant(id=AI_PLAYER_ID, name="AI")
