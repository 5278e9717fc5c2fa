"""
Tests for agents/ai_player.py — AI seat move requests.
"""

import asyncio

import pytest
from unittest.mock import AsyncMock

from agents.ai_player import AI_MOVE_FORMAT, AIPlayerAgent
from agents.tools.game_api_errors import AIMoveUnavailableError
from models import AI_PLAYER, GameSession, GameState
from tools.game_errors import ExternalServiceError

from conftest import ANN


def _session(board="fen-1"):
    return GameSession(
        session_id="g1",
        tenant_id="t",
        conversation_id="c",
        game="chess",
        players=[AI_PLAYER, ANN],
        state=GameState(version=0, next_players=[0], board=board),
    )


class TestAIPlayer:

    def test_request_move_uses_board_only(self):
        oracle = AsyncMock()
        oracle.best_move = AsyncMock(return_value="e2e4")
        agent = AIPlayerAgent(oracle, AsyncMock(), depth=5)
        assert asyncio.run(agent.request_move(_session("fen-xyz"))) == "e2e4"
        oracle.best_move.assert_awaited_once_with("fen-xyz", 5)

    def test_play_turn_submits_bestmove(self):
        oracle = AsyncMock()
        oracle.best_move = AsyncMock(return_value="e2e4")
        engine = AsyncMock()
        new_state = GameState(version=1, next_players=[1], board="fen-2")
        engine.perform_move = AsyncMock(return_value=new_state)
        session = _session()

        result = asyncio.run(AIPlayerAgent(oracle, engine).play_turn(session))

        assert result is new_state
        engine.perform_move.assert_awaited_once_with(session, "e2e4", AI_MOVE_FORMAT)
        assert session.state.version == 0

    def test_oracle_failure_skips_engine(self):
        oracle = AsyncMock()
        oracle.best_move = AsyncMock(side_effect=AIMoveUnavailableError("no move"))
        engine = AsyncMock()
        with pytest.raises(AIMoveUnavailableError):
            asyncio.run(AIPlayerAgent(oracle, engine).play_turn(_session()))
        engine.perform_move.assert_not_awaited()

    def test_missing_board(self):
        agent = AIPlayerAgent(AsyncMock(), AsyncMock())
        with pytest.raises(ExternalServiceError):
            asyncio.run(agent.request_move(_session(board="")))
