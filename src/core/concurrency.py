"""
Per-key lock registry.

One mutex per application id: writes to the same application are
serialized, writes to different applications run in parallel.
Entries are dropped once no thread holds or waits on them.
"""

import threading
from contextlib import contextmanager


class KeyedLock:
    """Lazily created, reference-counted `threading.Lock` per key."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}
        self._refs: dict[str, int] = {}

    @contextmanager
    def hold(self, key: str):
        with self._guard:
            lock = self._locks.setdefault(key, threading.Lock())
            self._refs[key] = self._refs.get(key, 0) + 1
        lock.acquire()
        try:
            yield
        finally:
            lock.release()
            with self._guard:
                self._refs[key] -= 1
                if self._refs[key] == 0:
                    del self._refs[key]
                    del self._locks[key]

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
