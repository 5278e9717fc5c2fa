"""
Discord renderer — MessageDocument -> Discord markdown.

No discord imports, so it can be tested on its own.
"""

from typing import List

from models.document import MessageDocument

DISCORD_LIMIT = 2000

EMOJI = {
    ":disapproval:": "\U0001f612",  # 😒
    ":warning:": "⚠️",
    ":checkered_flag:": "\U0001f3c1",
    ":information_source:": "ℹ️",
}


def render_emoji(marker: str) -> str:
    return EMOJI.get(marker, marker)


def render(document: MessageDocument) -> str:
    """Flatten a document into one Discord message body."""
    lines: List[str] = []
    for block in document.blocks:
        if block.code is not None:
            lines.append(f"```{block.language}\n{block.code}\n```")
            continue
        parts = []
        for run in block.runs:
            if run.kind == "mention":
                parts.append(f"<@{run.participant_id}>")
            elif run.kind == "emoji":
                parts.append(render_emoji(run.text))
            elif run.kind == "link":
                parts.append(f"[{run.text}](<{run.url}>)")
            else:
                parts.append(run.text)
        if parts:
            lines.append("".join(parts))
    return "\n".join(lines)


def chunk(text: str, limit: int = DISCORD_LIMIT) -> List[str]:
    """Split a long body into message-sized pieces."""
    if len(text) <= limit:
        return [text]
    return [text[i : i + limit] for i in range(0, len(text), limit)]
