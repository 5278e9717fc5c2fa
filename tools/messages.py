"""
Message builders — the documents the bot sends.

Everything here returns a MessageDocument; bot/render.py turns it into
Discord markdown.
"""

from typing import Iterable, Optional

from models.document import MessageDocument
from models.game_session import GameSession
from models.participant import Participant
from tools.command_parser import SUPPORTED_GAMES

BOT_NAME = "@Tabletop"
SAN_URL = "https://en.wikipedia.org/wiki/Algebraic_notation_(chess)"


def compose(*parts) -> MessageDocument:
    """Build a one-off reply from mixed parts.

    Strings become text, except "\\n" (new paragraph) and ":name:" (emoji
    marker, padded with spaces). Participants become mentions. (text, url)
    tuples become links.
    """
    doc = MessageDocument()
    for part in parts:
        if isinstance(part, Participant):
            doc.mention(part)
        elif isinstance(part, tuple):
            doc.link(*part)
        elif part == "\n":
            doc.paragraph()
        elif len(part) > 2 and part.startswith(":") and part.endswith(":"):
            doc.text("  ").emoji(part).text("  ")
        else:
            doc.text(part)
    return doc


def board_document(session: GameSession) -> MessageDocument:
    """Header line (players and engine status) plus the board as code."""
    doc = MessageDocument()
    for i, player in enumerate(session.players):
        if i:
            doc.text("  vs  ")
        doc.mention(player)
    if session.state.message:
        doc.text("\t\t").text(session.state.message)
    if session.state.board:
        doc.code_block(session.state.board)
    return doc


def your_move_document(players: Iterable[Participant]) -> MessageDocument:
    return compose("Your move: ", *players)


def game_over_document(session: GameSession) -> MessageDocument:
    return compose(":checkered_flag:", session.state.message or "Game over.")


def error_document(emoji: str, message: str) -> MessageDocument:
    return compose(emoji, message)


def not_found_message() -> str:
    return f"Game not found.\nTo start a new game:\n'{BOT_NAME} play chess with @someone'."


def usage_document(prefix: Optional[str] = None) -> MessageDocument:
    parts = [":information_source:"]
    if prefix:
        parts.append(prefix)
    parts += [
        "\n", "Usage:",
        "\n", f"\t{BOT_NAME} play <game> [ with ] {{ @opponent | AI }}",
        "\n", f"\t{BOT_NAME} [ <game> ] [ @opponent ] [ AI ] <move>",
        "\n", "Examples:",
        "\n", f"\t{BOT_NAME} play chess with @opponent",
        "\n", f"\t{BOT_NAME} play chess with AI",
        "\n", f"\t{BOT_NAME} e4",
        "\n", f"\t{BOT_NAME} @opponent dxe8=Q+",
        "\n", f"\t{BOT_NAME} chess AI Nbxc6#",
        "\n", "Supported games: " + ", ".join(f"'{g}'" for g in SUPPORTED_GAMES),
        "\n", "Chess moves are in ",
        ("Standard Algebraic Notation (SAN)", SAN_URL),
    ]
    return compose(*parts)


def welcome_document() -> MessageDocument:
    return compose(
        "Hi there! Thanks for adding me. Mention me with ",
        f"'{BOT_NAME} play chess with @someone'",
        " to start a game.",
    )


def games_list_document(sessions: Iterable[GameSession]) -> MessageDocument:
    sessions = list(sessions)
    if not sessions:
        return compose("You have no active games here.")
    doc = compose("Your active games:")
    for session in sessions:
        doc.paragraph().text(f"{session.game}: ")
        for i, player in enumerate(session.players):
            if i:
                doc.text(" vs ")
            doc.text(player.name or player.id)
        doc.text(f" ({session.status.value})")
    return doc
