"""
Tests for tools/chat_events.py — platform message -> ChatEvent.

Messages are SimpleNamespace stand-ins for discord.Message.
"""

from types import SimpleNamespace

from tools.chat_events import (
    DIRECT_TENANT,
    event_from_message,
    extract_mentions,
    extract_tokens,
    participant_from_user,
)

BOT_ID = 999


def _user(uid, display_name=None, global_name=None, name=None):
    return SimpleNamespace(id=uid, display_name=display_name, global_name=global_name, name=name)


def _message(content, mentions=(), guild_id=1, channel_id=2, author=None, message_id=77):
    return SimpleNamespace(
        id=message_id,
        content=content,
        mentions=list(mentions),
        guild=SimpleNamespace(id=guild_id) if guild_id is not None else None,
        channel=SimpleNamespace(id=channel_id),
        author=author or _user(111, display_name="ann"),
    )


class TestTokens:

    def test_mention_markup_removed(self):
        assert extract_tokens("<@999> play chess with <@!222>") == ["play", "chess", "with"]

    def test_role_and_channel_markup_removed(self):
        assert extract_tokens("<@&5> <#6> e4") == ["e4"]

    def test_empty(self):
        assert extract_tokens("") == []
        assert extract_tokens(None) == []


class TestParticipants:

    def test_name_preference(self):
        assert participant_from_user(_user(1, "Nick", "Global", "raw")).name == "Nick"
        assert participant_from_user(_user(1, None, "Global", "raw")).name == "Global"
        assert participant_from_user(_user(1, None, None, "raw")).name == "raw"

    def test_id_is_string(self):
        assert participant_from_user(_user(42, name="x")).id == "42"

    def test_bot_and_repeats_dropped(self):
        message = _message("", mentions=[_user(BOT_ID, name="bot"), _user(2, name="b"), _user(2, name="b"), _user(3, name="c")])
        assert [p.id for p in extract_mentions(message, BOT_ID)] == ["2", "3"]


class TestEventFromMessage:

    def test_guild_message(self):
        message = _message("<@999> play chess with <@222>", mentions=[_user(BOT_ID, name="bot"), _user(222, name="bob")])
        event = event_from_message(message, BOT_ID)
        assert event.tenant_id == "1"
        assert event.conversation_id == "2"
        assert event.message_id == "77"
        assert event.sender.id == "111"
        assert [p.id for p in event.mentions] == ["222"]
        assert event.tokens == ["play", "chess", "with"]

    def test_direct_message(self):
        event = event_from_message(_message("e4", guild_id=None), BOT_ID)
        assert event.tenant_id == DIRECT_TENANT
