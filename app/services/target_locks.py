"""Per-target serialization of lifecycle transitions."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager

from app.services.lifecycle_errors import PersistenceFailure


class TargetLockRegistry:
    """Hands out one lock per target key; idle locks are discarded.

    Transitions against the same key run one at a time, different keys never
    contend.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, list] = {}

    @contextmanager
    def hold(self, key: str, timeout: float | None = None) -> Iterator[None]:
        with self._guard:
            entry = self._locks.setdefault(key, [threading.Lock(), 0])
            entry[1] += 1
        lock: threading.Lock = entry[0]
        acquired = lock.acquire(timeout=-1 if timeout is None else timeout)
        try:
            if not acquired:
                raise PersistenceFailure(f"Timed out waiting for a concurrent change to {key}", target=key)
            yield
        finally:
            if acquired:
                lock.release()
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    self._locks.pop(key, None)

    def active_keys(self) -> set[str]:
        with self._guard:
            return set(self._locks)


target_locks: TargetLockRegistry = TargetLockRegistry()
