"""
Chat event extraction — platform message -> ChatEvent.

Pure Python — no discord imports. Reads the message through getattr()
so anything shaped like a discord.Message works (tests pass
SimpleNamespace objects).

Mentions become participants (minus the bot); every other piece of the
text is split into command tokens.
"""

import logging
import re
from typing import Any, List, Optional

from models.chat import ChatEvent
from models.participant import Participant, escape_id
from tools.command_parser import tokenize

logger = logging.getLogger("ChatEvents")

# <@123>, <@!123> (nickname form), <@&123> (roles) and <#123> (channels)
MENTION_MARKUP = re.compile(r"<(?:@[!&]?|#)\d+>")

DIRECT_TENANT = "direct"


def participant_from_user(user: Any) -> Participant:
    """Build a Participant from a discord User/Member-like object."""
    name = (
        getattr(user, "display_name", None)
        or getattr(user, "global_name", None)
        or getattr(user, "name", None)
        or ""
    )
    return Participant(id=getattr(user, "id"), name=name)


def extract_tokens(content: str) -> List[str]:
    """Command words from the message text, mention markup removed."""
    return tokenize(MENTION_MARKUP.sub(" ", content or ""))


def extract_mentions(message: Any, bot_user_id: Optional[Any] = None) -> List[Participant]:
    """Mentioned users in order, without the bot and without repeats."""
    bot_id = escape_id(bot_user_id) if bot_user_id is not None else None
    seen = set()
    participants = []
    for user in getattr(message, "mentions", None) or []:
        participant = participant_from_user(user)
        if participant.id == bot_id or participant.id in seen:
            continue
        seen.add(participant.id)
        participants.append(participant)
    return participants


def event_from_message(message: Any, bot_user_id: Optional[Any] = None) -> ChatEvent:
    """Convert a platform message into the ChatEvent the core consumes."""
    guild = getattr(message, "guild", None)
    channel = getattr(message, "channel", None)
    event = ChatEvent(
        tenant_id=str(guild.id) if guild is not None else DIRECT_TENANT,
        conversation_id=str(getattr(channel, "id", "")),
        message_id=str(message.id) if getattr(message, "id", None) is not None else None,
        sender=participant_from_user(message.author),
        mentions=extract_mentions(message, bot_user_id),
        tokens=extract_tokens(getattr(message, "content", "")),
    )
    logger.debug(f"Event from message {event.message_id}: tokens={event.tokens}")
    return event
