"""In-process exclusive sections keyed by punch card id."""

import threading
from contextlib import contextmanager


class CardLockRegistry:
    """
    One lock per key, created on demand and dropped when unused.

    Unrelated cards never wait on each other. Across processes the row
    lock taken by PunchCardStore.get_for_update() does the same job.
    """

    def __init__(self):
        self._mutex = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}
        self._holders: dict[str, int] = {}

    @contextmanager
    def hold(self, key: str):
        with self._mutex:
            lock = self._locks.setdefault(key, threading.Lock())
            self._holders[key] = self._holders.get(key, 0) + 1
        try:
            with lock:
                yield
        finally:
            with self._mutex:
                self._holders[key] -= 1
                if not self._holders[key]:
                    del self._holders[key]
                    del self._locks[key]

    def __len__(self):
        with self._mutex:
            return len(self._locks)
