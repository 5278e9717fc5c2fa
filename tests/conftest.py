"""
Shared pytest fixtures for the Tabletop Bot test suite.

In-memory fakes for the rules engine and the chat platform, so the turn
engine can be driven end to end without any network.
"""

import asyncio

import pytest
from unittest.mock import AsyncMock

from agents.ai_player import AIPlayerAgent
from models import ChatEvent, CreatedGame, GameState, Participant
from tools.game_table import GameTable
from tools.session_directory import SessionDirectory

START_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

ANN = Participant(id="111", name="@ann")
BOB = Participant(id="222", name="@bob")
CAT = Participant(id="333", name="@cat")


# ---------------------------------------------------------------------------
# Fakes (reusable classes)
# ---------------------------------------------------------------------------

class FakeRulesEngine:
    """Two-seat engine: turns alternate, a move ending in '#' ends the game.

    Set `fail_with` to an exception to make every perform_move raise it.
    """

    def __init__(self, first_slot: int = 0):
        self.first_slot = first_slot
        self.created = []
        self.moves = []
        self.fail_with = None
        self._counter = 0

    async def create_game(self, contacts, game="chess"):
        await asyncio.sleep(0)
        self._counter += 1
        self.created.append((list(contacts), game))
        return CreatedGame(
            session_id=f"game-{self._counter}",
            players=[Participant.from_contact(c) for c in contacts],
            state=GameState(
                version=0,
                message="Game started",
                next_players=[self.first_slot],
                board=START_FEN,
            ),
        )

    async def perform_move(self, session, move, move_format="san"):
        await asyncio.sleep(0)  # suspend like a network call would
        self.moves.append((session.session_id, move, move_format))
        if self.fail_with is not None:
            raise self.fail_with
        version = session.state.version + 1
        over = move.endswith("#")
        current = session.state.next_players[0] if session.state.next_players else 0
        return GameState(
            version=version,
            game_over=over,
            message="Checkmate" if over else f"{move} played",
            next_players=[] if over else [1 - current],
            board=f"board-v{version}",
        )


class FakeChat:
    """Records everything the bot would have sent.

    Set `fail_updates` to an exception to make every board edit raise it.
    """

    def __init__(self):
        self.fail_updates = None
        self.posts = []
        self.updates = []
        self.notices = []
        self._next_id = 0

    async def post(self, event, document):
        self._next_id += 1
        self.posts.append(document)
        return f"msg-{self._next_id}"

    async def update(self, event, message_ref, document):
        if self.fail_updates is not None:
            raise self.fail_updates
        self.updates.append((message_ref, document))
        return message_ref

    async def notify(self, event, participants, document):
        self.notices.append((list(participants), document))

    @property
    def texts(self):
        return [d.plain_text() for d in self.posts]


class FixedOrder:
    """Stand-in for random.Random: keeps or reverses the seat order."""

    def __init__(self, reverse: bool = False):
        self.reverse = reverse

    def shuffle(self, items):
        if self.reverse:
            items.reverse()


def make_event(sender=ANN, tokens=(), mentions=(), tenant="guild-1", conversation="chan-1"):
    return ChatEvent(
        tenant_id=tenant,
        conversation_id=conversation,
        sender=sender,
        mentions=list(mentions),
        tokens=list(tokens),
    )


# ---------------------------------------------------------------------------
# Pytest fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def directory():
    return SessionDirectory()


@pytest.fixture
def engine():
    return FakeRulesEngine()


@pytest.fixture
def chat():
    return FakeChat()


@pytest.fixture
def oracle():
    """AsyncMock oracle that always suggests e7e5."""
    mock = AsyncMock()
    mock.best_move = AsyncMock(return_value="e7e5")
    return mock


@pytest.fixture
def ai_player(oracle, engine):
    return AIPlayerAgent(oracle, engine)


@pytest.fixture
def table(directory, engine, ai_player, chat):
    """GameTable whose seat order is [opponent, sender]."""
    return GameTable(directory, engine, ai_player, chat, rng=FixedOrder())
