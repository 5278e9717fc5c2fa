"""
Game API Client — remote rules engine (Async)

The rules engine owns the games: it creates them, validates every move
and reports whose turn is next and whether the game is over. The bot
only forwards moves and renders what comes back.

Endpoints:
  POST /games?rules=<game>                              -> {"game": {...}}
  PUT  /games/<id>/players/<n>?contact=<contact>        -> {"game_player": {...}}
  PUT  /games/<id>/states/<version>?move=<m>&format=<f> -> {"game_state": {...}}

Requires:
  - GAME_API_URL: Rules engine base URL
  - GAME_API_KEY: Sent as the X-GameApiKey header
  - GAME_API_TIMEOUT: Optional per-request timeout in seconds (default: none)

All public methods are async. Callers must `await` every call.
"""

import os
import random
import asyncio
import logging
from typing import Optional, Dict, Any, List, Sequence

import aiohttp

from agents.tools.game_api_errors import (
    GameApiError,
    GameApiConnectionError,
    GameApiTimeoutError,
    GameApiServerError,
    GameApiRejectedError,
    GameApiNotFoundError,
    GameApiAuthError,
)
from models.game_session import CreatedGame, GameSession, GameState
from models.participant import Participant

logger = logging.getLogger('GameApiClient')

RETRYABLE_METHODS = ('GET', 'PUT')


def timeout_from_env() -> Optional[float]:
    raw = os.getenv('GAME_API_TIMEOUT')
    return float(raw) if raw else None


class JsonApiClient:
    """Shared HTTP layer for the game services: JSON in, JSON out.

    Owns one aiohttp session, created on first use. Connection errors on
    idempotent methods are retried with exponential backoff; everything
    else propagates as a GameApiError subclass.
    """

    service_name = 'Game API'

    def __init__(self, base_url: str, timeout: Optional[float] = None):
        self.base_url = (base_url or '').rstrip('/')
        self.timeout = timeout
        self._session: Optional[aiohttp.ClientSession] = None

        # Retry settings
        self.max_retries = 3
        self.base_delay = 1.0  # seconds; doubles each retry (1, 2, 4)

    # ------------------------------------------------------------------
    # Internal HTTP layer
    # ------------------------------------------------------------------

    def _headers(self) -> Dict[str, str]:
        return {'Accept': 'application/json'}

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def _raise_for_status(self, resp: aiohttp.ClientResponse) -> None:
        """Map HTTP status codes to specific game API error types.

        The services report failures as {"error": "..."}; that text becomes
        the message the players see.
        """
        if resp.status < 400:
            return
        body = await resp.text()
        detail = body
        try:
            payload = await resp.json(content_type=None)
            if isinstance(payload, dict) and payload.get('error'):
                detail = str(payload['error'])
        except ValueError:
            pass
        detail = detail or f'Unexpected {self.service_name} error'

        if resp.status in (401, 403):
            raise GameApiAuthError(f"{self.service_name} auth failed ({resp.status}): {detail}")
        elif resp.status == 404:
            raise GameApiNotFoundError(f"{self.service_name} not found ({resp.status}): {detail}")
        elif resp.status >= 500:
            raise GameApiServerError(f"{self.service_name} error ({resp.status}): {detail}")
        else:
            raise GameApiRejectedError(detail)

    async def _raw_request(
        self,
        method: str,
        path: str,
        params: Optional[Dict] = None,
    ) -> Any:
        """Execute a single HTTP request (no retry)."""
        if not self.base_url:
            raise GameApiError(f"{self.service_name} URL is not configured.")
        session = await self._ensure_session()
        url = f"{self.base_url}{path}"
        client_timeout = aiohttp.ClientTimeout(total=self.timeout)

        logger.info(f"- {self.service_name}: {method} {path} {params or ''}")
        try:
            async with session.request(method, url, headers=self._headers(), params=params,
                                       timeout=client_timeout) as resp:
                await self._raise_for_status(resp)
                data = await resp.json(content_type=None)
                logger.debug(f"- {self.service_name}: response {data}")
                return data

        except aiohttp.ClientError as e:
            raise GameApiConnectionError(f"{self.service_name} network error: {e}") from e
        except asyncio.TimeoutError as e:
            raise GameApiTimeoutError(f"{self.service_name} timed out after {self.timeout}s: {path}") from e
        except ValueError as e:
            raise GameApiError(f"{self.service_name} sent an invalid response: {e}") from e

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict] = None,
        retry: bool = True,
    ) -> Any:
        """HTTP request with retry for idempotent methods.

        Pass retry=False for requests that must not be repeated even though
        the method is a PUT (e.g. version-conditional state writes).
        """
        attempts = self.max_retries if retry and method in RETRYABLE_METHODS else 1

        last_error: Optional[Exception] = None
        for attempt in range(attempts):
            try:
                return await self._raw_request(method, path, params=params)
            except (GameApiConnectionError, GameApiTimeoutError) as e:
                last_error = e
                if attempt < attempts - 1:
                    delay = self.base_delay * (2 ** attempt) + random.uniform(0, 0.5)
                    logger.warning(
                        f"{self.service_name} request failed (attempt {attempt + 1}/{attempts}), "
                        f"retrying in {delay:.1f}s: {e}"
                    )
                    await asyncio.sleep(delay)
            # Rejections and server errors propagate immediately

        logger.error(f"{self.service_name} request {method} {path} failed: {last_error}")
        raise last_error  # type: ignore[misc]


class GameApiClient(JsonApiClient):
    """Async client for the rules engine.

    Usage:
        engine = GameApiClient()
        created = await engine.create_game(["chat:1:@ann", "chat:2:@bob"])
        state = await engine.perform_move(session, "e4")
        await engine.close()
    """

    service_name = 'Game API'

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        super().__init__(
            base_url or os.getenv('GAME_API_URL', ''),
            timeout if timeout is not None else timeout_from_env(),
        )
        self.api_key = api_key or os.getenv('GAME_API_KEY')
        if not self.base_url or not self.api_key:
            logger.warning("GAME_API_URL / GAME_API_KEY not set — games cannot be created.")

    def _headers(self) -> Dict[str, str]:
        headers = super()._headers()
        headers['X-GameApiKey'] = self.api_key or ''
        return headers

    # ------------------------------------------------------------------
    # Games
    # ------------------------------------------------------------------

    async def create_game(self, contacts: Sequence[str], game: str = 'chess') -> CreatedGame:
        """Create a game and seat one contact per player slot, in order."""
        data = await self._request('POST', '/games', params={'rules': game})
        created = data.get('game') or {}
        game_id = created.get('game_id')
        if game_id is None:
            raise GameApiError("Game API did not return a game id.")
        states = created.get('game_states') or []
        state = GameState.from_api(states[-1]) if states else GameState()

        seated = await asyncio.gather(*[
            self._request('PUT', f'/games/{game_id}/players/{slot}', params={'contact': contact})
            for slot, contact in enumerate(contacts)
        ])

        players = self._players_from_contacts(
            [(s.get('game_player') or {}).get('contact', '') for s in seated]
        ) or self._players_from_contacts(list(contacts))
        if not players:
            raise GameApiError("Game API returned players we can't address.")

        logger.info(f"Created game {game_id} ({game}) for {list(contacts)}")
        return CreatedGame(session_id=str(game_id), players=players, state=state)

    async def perform_move(
        self,
        session: GameSession,
        move: str,
        move_format: str = 'san',
    ) -> GameState:
        """Submit a move as the next state version. Returns the new state.

        The session is not modified; the caller stores the returned state.
        Not retried: the write may have landed even when the response is lost.
        """
        next_version = session.state.version + 1
        data = await self._request(
            'PUT',
            f'/games/{session.session_id}/states/{next_version}',
            params={'move': move, 'format': move_format},
            retry=False,
        )
        game_state = data.get('game_state')
        if not game_state:
            raise GameApiError("Game API did not return a game state.")
        return GameState.from_api(game_state)

    @staticmethod
    def _players_from_contacts(contacts: List[str]) -> List[Participant]:
        players = [Participant.from_contact(c) for c in contacts]
        if not players or any(p is None for p in players):
            return []
        return players
