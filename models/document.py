"""
Outbound message document — ordered runs of text, mentions, emoji and links.

Platform adapters turn a MessageDocument into whatever their API wants
(see bot/render.py). The core only composes.
"""

from typing import List, Literal, Optional
from pydantic import BaseModel, Field

from models.participant import Participant


class Run(BaseModel):
    """One inline run inside a paragraph."""

    kind: Literal["text", "mention", "emoji", "link"]
    text: str = ""
    participant_id: Optional[str] = None
    url: Optional[str] = None


class Block(BaseModel):
    """A paragraph of runs, or a code block when `code` is set."""

    runs: List[Run] = Field(default_factory=list)
    code: Optional[str] = None
    language: str = ""


class MessageDocument(BaseModel):
    """Builder-style document. Methods return self so calls can chain."""

    blocks: List[Block] = Field(default_factory=lambda: [Block()])

    def _current(self) -> Block:
        if not self.blocks or self.blocks[-1].code is not None:
            self.blocks.append(Block())
        return self.blocks[-1]

    def paragraph(self) -> "MessageDocument":
        self.blocks.append(Block())
        return self

    def text(self, text: str) -> "MessageDocument":
        self._current().runs.append(Run(kind="text", text=text))
        return self

    def mention(self, participant: Participant) -> "MessageDocument":
        """Mention a human; the AI sentinel is written as plain text."""
        if participant.is_ai:
            return self.text(participant.name)
        self._current().runs.append(
            Run(kind="mention", text=participant.name, participant_id=participant.platform_id)
        )
        return self

    def emoji(self, marker: str) -> "MessageDocument":
        self._current().runs.append(Run(kind="emoji", text=marker))
        return self

    def link(self, text: str, url: str) -> "MessageDocument":
        self._current().runs.append(Run(kind="link", text=text, url=url))
        return self

    def code_block(self, code: str, language: str = "") -> "MessageDocument":
        self.blocks.append(Block(code=code, language=language))
        return self

    def plain_text(self) -> str:
        """Flatten to text, mostly for logs and tests."""
        lines = []
        for block in self.blocks:
            if block.code is not None:
                lines.append(block.code)
            elif block.runs:
                lines.append("".join(r.text for r in block.runs))
        return "\n".join(lines)
