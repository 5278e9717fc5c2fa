"""
Chess AI Client — remote move oracle (Async)

Asks a chess engine service for the best move in a position:

  GET /moves?fen=<fen>&depth=<n>
  -> {"bestmove": "g7g6", "actualdepth": 10, "interrupted": false,
      "millis": 1271, "ponder": "d7d8"}

Requires:
  - GAME_AI_URL: Oracle base URL
  - GAME_AI_DEPTH: Optional search depth (default: 7)
"""

import os
import logging
from typing import Optional

from agents.tools.game_api import JsonApiClient, timeout_from_env
from agents.tools.game_api_errors import AIMoveUnavailableError

logger = logging.getLogger('ChessAIClient')

DEFAULT_DEPTH = 7


class ChessAIClient(JsonApiClient):
    """Async client for the AI move oracle."""

    service_name = 'Chess AI'

    def __init__(
        self,
        base_url: Optional[str] = None,
        depth: Optional[int] = None,
        timeout: Optional[float] = None,
    ):
        super().__init__(
            base_url or os.getenv('GAME_AI_URL', ''),
            timeout if timeout is not None else timeout_from_env(),
        )
        self.depth = depth or int(os.getenv('GAME_AI_DEPTH', DEFAULT_DEPTH))
        if not self.base_url:
            logger.warning("GAME_AI_URL not set — AI opponents disabled.")

    async def best_move(self, fen: str, depth: Optional[int] = None) -> str:
        """Best move for the side to play, in the oracle's own notation."""
        data = await self._request(
            'GET', '/moves', params={'fen': fen, 'depth': depth or self.depth},
        )
        move = data.get('bestmove') if isinstance(data, dict) else None
        if not move:
            raise AIMoveUnavailableError("Chess AI API failed to suggest a move.")
        logger.info(
            f"Oracle move {move} (depth {data.get('actualdepth')}, {data.get('millis')}ms)"
        )
        return move
