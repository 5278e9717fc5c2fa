"""
SessionDirectory — in-memory index of active game sessions.

Sessions live in one primary map (session id -> GameSession). To find
them again from a chat command we keep a multi-keyed index:

    (tenant, conversation, players-signature, game-or-"_all") -> {session ids}

The players signature is the sorted, de-duplicated, comma-joined set of
participant ids. Each session is indexed under its full player set AND
under every individual player, each with and without its game, so a
command can ask either "the game between these players" or "any game
this one player is in":

    2 x (number of players + 1) index entries per session

Removal deletes exactly the entries insert wrote, and an index key whose
set becomes empty is deleted rather than left behind.

Nothing is persisted; a restart forgets every game. Construct one per
process and hand it to the components that need it.
"""

import logging
from typing import Dict, Iterable, List, NamedTuple, Optional, Set

from models.game_session import GameSession
from tools.game_errors import GameValidationError
from tools.session_locks import SessionLocks

logger = logging.getLogger("SessionDirectory")

WILDCARD = "_all"


class IndexKey(NamedTuple):
    tenant_id: str
    conversation_id: str
    players: str
    game: str

    def __str__(self) -> str:
        return f"{self.tenant_id}:{self.conversation_id}:{self.players}:{self.game}"


def player_signature(participant_ids: Iterable[str]) -> str:
    """Sorted, de-duplicated, comma-joined participant ids."""
    return ",".join(sorted(set(participant_ids)))


def _check_scope(tenant_id, conversation_id, participant_ids) -> List[str]:
    if not tenant_id:
        raise GameValidationError("tenant not specified")
    if not conversation_id:
        raise GameValidationError("conversation not specified")
    ids = [pid for pid in (participant_ids or []) if pid]
    if not ids:
        raise GameValidationError("at least one participant id is required")
    return ids


class SessionDirectory:
    """Primary session store plus the multi-keyed lookup index."""

    def __init__(self, locks: Optional[SessionLocks] = None):
        self._sessions: Dict[str, GameSession] = {}
        self._index: Dict[IndexKey, Set[str]] = {}
        self.locks = locks or SessionLocks()

    # ------------------------------------------------------------------
    # Keys
    # ------------------------------------------------------------------

    @staticmethod
    def index_keys(
        tenant_id: str,
        conversation_id: str,
        participant_ids: Iterable[str],
        game: str,
    ) -> List[IndexKey]:
        """Every index key insert() writes for this tuple, without duplicates."""
        ids = _check_scope(tenant_id, conversation_id, list(participant_ids))
        if not game:
            raise GameValidationError("game not specified")

        signatures = [player_signature(ids)]
        signatures.extend(player_signature([pid]) for pid in sorted(set(ids)))

        keys: List[IndexKey] = []
        for signature in signatures:
            for g in (WILDCARD, game):
                key = IndexKey(tenant_id, conversation_id, signature, g)
                if key not in keys:
                    keys.append(key)
        return keys

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def lookup(
        self,
        tenant_id: str,
        conversation_id: str,
        participant_ids: Iterable[str],
        game: Optional[str] = None,
    ) -> List[str]:
        """Session ids indexed under exactly this player set (and game).

        `game=None` searches every game. Returns [] when nothing matches.
        """
        ids = _check_scope(tenant_id, conversation_id, list(participant_ids))
        key = IndexKey(tenant_id, conversation_id, player_signature(ids), game or WILDCARD)
        result = sorted(self._index.get(key, ()))
        logger.debug(f"lookup({key}) == {result}")
        return result

    def get(self, session_id: str) -> Optional[GameSession]:
        return self._sessions.get(session_id)

    def sessions_for(
        self,
        tenant_id: str,
        conversation_id: str,
        participant_id: str,
        game: Optional[str] = None,
    ) -> List[GameSession]:
        """All live sessions one participant is in, within a conversation."""
        found = []
        for session_id in self.lookup(tenant_id, conversation_id, [participant_id], game):
            session = self._sessions.get(session_id)
            if session is not None:
                found.append(session)
        return found

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def insert(
        self,
        tenant_id: str,
        conversation_id: str,
        participant_ids: Iterable[str],
        game: str,
        session: GameSession,
    ) -> None:
        """Store the session and write all of its index entries."""
        keys = self.index_keys(tenant_id, conversation_id, participant_ids, game)
        self._sessions[session.session_id] = session
        for key in keys:
            self._index.setdefault(key, set()).add(session.session_id)
            logger.debug(f"adding {key} = {session.session_id}")
        logger.info(
            f"Session {session.session_id} indexed under {len(keys)} keys "
            f"({len(self._sessions)} active)"
        )

    def remove(
        self,
        tenant_id: str,
        conversation_id: str,
        participant_ids: Iterable[str],
        game: str,
        session_id: str,
    ) -> None:
        """Delete the session and every index entry insert() made for it.

        Unknown keys or ids are ignored.
        """
        keys = self.index_keys(tenant_id, conversation_id, participant_ids, game)
        self._sessions.pop(session_id, None)
        for key in keys:
            values = self._index.get(key)
            if values is None:
                continue
            logger.debug(f"deleting {key} = {session_id}")
            values.discard(session_id)
            if not values:
                del self._index[key]
        logger.info(f"Session {session_id} removed ({len(self._sessions)} active)")

    # ------------------------------------------------------------------
    # Locks & introspection
    # ------------------------------------------------------------------

    def lock(self, session_id: str):
        """Async context manager serializing work on one session."""
        return self.locks.hold(session_id)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    @property
    def index_size(self) -> int:
        """Total (key, session id) entries across the index."""
        return sum(len(v) for v in self._index.values())
