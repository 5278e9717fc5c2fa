"""
Tests for models/ — participants, contacts and game session state.
"""

import pytest
from pydantic import ValidationError

from models import AI_PLAYER, GameSession, GameState, Intent, Participant, SessionStatus

from conftest import ANN, BOB


def _session(next_players, game_over=False, players=None):
    return GameSession(
        session_id="g", tenant_id="t", conversation_id="c", game="chess",
        players=players or [ANN, BOB],
        state=GameState(version=2, next_players=next_players, game_over=game_over),
    )


class TestParticipant:

    def test_contact_round_trip(self):
        p = Participant(id="u:1", name="@ann")
        assert p.to_contact() == "chat:u~1:@ann"
        back = Participant.from_contact(p.to_contact())
        assert back == p
        assert back.platform_id == "u:1"

    def test_name_may_contain_colons(self):
        assert Participant.from_contact("chat:5:a:b").name == "a:b"

    def test_foreign_scheme(self):
        assert Participant.from_contact("stride:5:x") is None
        assert Participant.from_contact("garbage") is None

    def test_ai_sentinel(self):
        assert AI_PLAYER.is_ai
        assert AI_PLAYER.id == "_none"
        assert not ANN.is_ai

    def test_frozen(self):
        with pytest.raises(ValidationError):
            ANN.name = "other"


class TestGameState:

    def test_from_api(self):
        state = GameState.from_api({
            "version": 3,
            "state": {"game_over": False, "message": "White to move", "next_players": [0], "fen": "f"},
        })
        assert state == GameState(version=3, message="White to move", next_players=[0], board="f")

    def test_from_api_defaults(self):
        assert GameState.from_api({}) == GameState()

    def test_negative_version_rejected(self):
        with pytest.raises(ValidationError):
            GameState(version=-1)


class TestGameSession:

    def test_status(self):
        assert _session([0]).status is SessionStatus.AWAITING_HUMAN
        assert _session([1], players=[ANN, AI_PLAYER]).status is SessionStatus.AWAITING_AI
        assert _session([], game_over=True).status is SessionStatus.GAME_OVER

    def test_next_participants_ignores_bad_slots(self):
        assert _session([1, 5]).next_participants() == [BOB]

    def test_is_next(self):
        session = _session([0])
        assert session.is_next(ANN.id)
        assert not session.is_next(BOB.id)


class TestIntent:

    def test_vs_ai(self):
        assert Intent(action="move", game="chess", opponent=AI_PLAYER, move="e4").vs_ai
        assert not Intent(action="move", game="chess", move="e4").vs_ai
