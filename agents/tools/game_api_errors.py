"""
Game API Error Types — structured failures from the rules engine and AI oracle.

Lets callers distinguish retryable failures (service down, network blip)
from non-retryable ones (illegal move, bad key) so the retry loop only
retries what makes sense. All of them are ExternalServiceErrors, so the
bot surfaces them the same way.
"""

from tools.game_errors import ExternalServiceError


class GameApiError(ExternalServiceError):
    """Base class for all game service errors."""
    pass


class GameApiConnectionError(GameApiError):
    """Service is unreachable or the connection dropped. Retryable."""
    pass


class GameApiTimeoutError(GameApiError):
    """Request timed out. Retryable."""
    pass


class GameApiServerError(GameApiError):
    """Service returned 5xx. Not retried: the move may have been applied."""
    pass


class GameApiRejectedError(GameApiError):
    """Service refused the request (4xx), e.g. an illegal move. NOT retryable."""
    pass


class GameApiNotFoundError(GameApiRejectedError):
    """The game or state does not exist (404). NOT retryable."""
    pass


class GameApiAuthError(GameApiRejectedError):
    """API key rejected (401/403). NOT retryable without config change."""
    pass


class AIMoveUnavailableError(GameApiError):
    """The AI oracle answered but did not return a move."""
    pass
