"""
Game Error Types — everything that can stop a chat command.

Each error carries the emoji marker and text the bot shows the user.
GameTable catches GameError once per event and turns it into a single
notice, so raising one of these is the only way a handler needs to
report a problem.
"""


class GameError(Exception):
    """Base class for all user-visible game errors."""

    emoji = ":disapproval:"

    @property
    def user_message(self) -> str:
        return str(self)


class GameValidationError(GameError):
    """A directory call or command violated its contract (missing tenant,
    conversation, players or game; wrong number of opponents)."""

    emoji = ":warning:"


class UnsupportedGameError(GameError):
    """The named game kind is not one we can play."""

    def __init__(self, game: str):
        super().__init__(f"No such game '{game}'.")
        self.game = game


class GameNotFoundError(GameError):
    """No active session matched the sender (and mentioned players)."""


class AmbiguousGameError(GameError):
    """More than one active session matched; the bot never guesses."""

    def __init__(self, session_ids=None):
        super().__init__(
            "Too many games found. Please specify which game by mentioning the other @player."
        )
        self.session_ids = list(session_ids or [])


class GameAlreadyExistsError(GameError):
    """A start was blocked because the same players already have that game."""

    def __init__(self, message: str = "Game already exists."):
        super().__init__(message)


class NotYourTurnError(GameError):
    """The sender is not among the engine's next players."""

    def __init__(self, message: str = "It's not your turn."):
        super().__init__(message)


class ExternalServiceError(GameError):
    """The rules engine or the AI oracle failed. Session state is untouched."""

    emoji = ":warning:"
