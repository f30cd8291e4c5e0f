"""In-process, per-user mutual exclusion for syncs and recomputes."""

import logging
import threading
from contextlib import contextmanager
from typing import Iterator
from uuid import UUID

from .errors import SyncInProgressError

logger = logging.getLogger(__name__)


class SyncLockRegistry:
    """One lock per user, created on first use.

    Only guards against overlap within a single process.
    """

    def __init__(self):
        self._locks: dict[UUID, threading.Lock] = {}
        self._guard = threading.Lock()

    def _lock_for(self, user_id: UUID) -> threading.Lock:
        with self._guard:
            return self._locks.setdefault(user_id, threading.Lock())

    @contextmanager
    def hold(self, user_id: UUID, blocking: bool = False) -> Iterator[None]:
        """Hold the user's lock for the duration of the block.

        Raises:
            SyncInProgressError: If not blocking and the lock is already held.
        """
        lock = self._lock_for(user_id)
        if not lock.acquire(blocking=blocking):
            logger.warning(f"Rejected overlapping sync for user {user_id}")
            raise SyncInProgressError(user_id)
        try:
            yield
        finally:
            lock.release()

    def is_locked(self, user_id: UUID) -> bool:
        return self._lock_for(user_id).locked()
