"""
SessionLocks — one asyncio.Lock per key, created on demand.

A move chain (human move plus any AI replies) holds its session's lock
from lookup to the last board update, so two commands for the same game
can't interleave their read-modify-write of the turn state. Different
sessions never wait on each other.

Locks are dropped once nobody holds or waits for them, so the table
doesn't grow with every game ever played.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Dict, Hashable

logger = logging.getLogger("SessionLocks")


class SessionLocks:
    """Keyed asyncio locks.

    Usage:
        locks = SessionLocks()
        async with locks.hold(session_id):
            ...  # exclusive for this session id
    """

    def __init__(self):
        self._locks: Dict[Hashable, asyncio.Lock] = {}
        self._users: Dict[Hashable, int] = {}

    @asynccontextmanager
    async def hold(self, key: Hashable):
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        self._users[key] = self._users.get(key, 0) + 1
        try:
            if lock.locked():
                logger.debug(f"Waiting for lock on {key}")
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]

    def is_locked(self, key: Hashable) -> bool:
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    def __len__(self) -> int:
        return len(self._locks)
