"""
Command Parser — turns free-text chat commands into an Intent.

Pure Python. No Discord imports. The caller tokenizes the text nodes of a
message (see tokenize()) and passes the mentioned participants, with the
bot itself already removed.

Grammar, most specific first (first matching rule wins):

    play|start|begin|create <game> [with] AI          -> start vs AI
    play|start|begin|create <game> [with] @someone    -> start vs human
    <game> AI <move>                                  -> move, AI hint
    AI <move>                                         -> move, AI hint
    <game> <move>                                     -> move
    <move>                                            -> move

Rules are rows in RULES, so a new phrasing or game is a new row rather
than another branch.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from models.intent import Intent
from models.participant import AI_PLAYER, Participant
from tools.game_errors import GameValidationError, UnsupportedGameError

logger = logging.getLogger("CommandParser")

SUPPORTED_GAMES = ("chess",)
DEFAULT_GAME = "chess"

PLAY_WORDS = frozenset({"play", "start", "begin", "create"})
WITH_WORDS = frozenset({"with", "vs", "vs.", "versus", "against"})
AI_WORDS = frozenset({"ai", "computer", "machine", "you"})


def tokenize(text: str) -> List[str]:
    """Split on whitespace, trim, and drop empty tokens."""
    return [t.strip() for t in text.split() if t.strip()]


def _is(words: frozenset, token: str) -> bool:
    return token.lower() in words


def resolve_game(token: Optional[str]) -> str:
    """Lower-case a game token and check we support it. None means default."""
    if not token:
        return DEFAULT_GAME
    game = token.lower()
    if game not in SUPPORTED_GAMES:
        raise UnsupportedGameError(game)
    return game


# ------------------------------------------------------------------
# Shapes: predicates over the token list
# ------------------------------------------------------------------

def _start_vs_ai_shape(tokens: Sequence[str]) -> bool:
    if len(tokens) == 3:
        return _is(PLAY_WORDS, tokens[0]) and _is(AI_WORDS, tokens[2])
    if len(tokens) == 4:
        return (
            _is(PLAY_WORDS, tokens[0])
            and _is(WITH_WORDS, tokens[2])
            and _is(AI_WORDS, tokens[3])
        )
    return False


def _start_vs_player_shape(tokens: Sequence[str]) -> bool:
    if len(tokens) == 2:
        return _is(PLAY_WORDS, tokens[0])
    if len(tokens) == 3:
        return _is(PLAY_WORDS, tokens[0]) and _is(WITH_WORDS, tokens[2])
    return False


def _move_game_vs_ai_shape(tokens: Sequence[str]) -> bool:
    return len(tokens) == 3 and _is(AI_WORDS, tokens[1])


def _move_vs_ai_shape(tokens: Sequence[str]) -> bool:
    return len(tokens) == 2 and _is(AI_WORDS, tokens[0])


def _move_game_shape(tokens: Sequence[str]) -> bool:
    return len(tokens) == 2


def _move_shape(tokens: Sequence[str]) -> bool:
    return len(tokens) == 1


# ------------------------------------------------------------------
# Builders: token list + mentions -> Intent
# ------------------------------------------------------------------

def _build_start_vs_ai(tokens, mentions) -> Intent:
    return Intent(action="start", game=resolve_game(tokens[1]), opponent=AI_PLAYER)


def _build_start_vs_player(tokens, mentions) -> Optional[Intent]:
    game = resolve_game(tokens[1])
    if not mentions:
        return None  # no opponent named; caller shows usage
    if len(mentions) > 1:
        raise GameValidationError(
            "Mention exactly one opponent to start a game "
            f"({len(mentions)} players were mentioned)."
        )
    return Intent(action="start", game=game, opponent=mentions[0])


def _build_move_game_vs_ai(tokens, mentions) -> Intent:
    return Intent(action="move", game=resolve_game(tokens[0]), opponent=AI_PLAYER, move=tokens[2])


def _build_move_vs_ai(tokens, mentions) -> Intent:
    return Intent(action="move", game=DEFAULT_GAME, opponent=AI_PLAYER, move=tokens[1])


def _build_move_game(tokens, mentions) -> Intent:
    return Intent(action="move", game=resolve_game(tokens[0]), move=tokens[1])


def _build_move(tokens, mentions) -> Intent:
    return Intent(action="move", game=DEFAULT_GAME, move=tokens[0])


@dataclass(frozen=True)
class CommandRule:
    """One grammar row: a shape predicate and the Intent it produces."""

    name: str
    shape: Callable[[Sequence[str]], bool]
    build: Callable[[Sequence[str], Sequence[Participant]], Optional[Intent]]


RULES = (
    CommandRule("start_vs_ai", _start_vs_ai_shape, _build_start_vs_ai),
    CommandRule("start_vs_player", _start_vs_player_shape, _build_start_vs_player),
    CommandRule("move_game_vs_ai", _move_game_vs_ai_shape, _build_move_game_vs_ai),
    CommandRule("move_vs_ai", _move_vs_ai_shape, _build_move_vs_ai),
    CommandRule("move_game", _move_game_shape, _build_move_game),
    CommandRule("move", _move_shape, _build_move),
)


def interpret_command(
    tokens: Sequence[str],
    mentions: Sequence[Participant] = (),
) -> Optional[Intent]:
    """Match tokens against RULES.

    Returns None when no rule matches. Raises UnsupportedGameError when a
    rule matched but named a game we don't play, and GameValidationError
    for a start that mentions more than one opponent.
    """
    tokens = [t for t in tokens if t]
    for rule in RULES:
        if rule.shape(tokens):
            intent = rule.build(tokens, list(mentions))
            logger.debug(f"Command {tokens} matched '{rule.name}' -> {intent}")
            return intent
    logger.debug(f"Command {tokens} matched no rule")
    return None


def parse_command(
    tokens: Sequence[str],
    mentions: Sequence[Participant] = (),
) -> Optional[Intent]:
    """Like interpret_command(), but an unsupported game yields None."""
    try:
        return interpret_command(tokens, mentions)
    except UnsupportedGameError as e:
        logger.info(f"Ignoring command for unsupported game '{e.game}'")
        return None
