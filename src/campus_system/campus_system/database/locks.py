from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Dict, Hashable, Iterator, List, Tuple


class EntityLocks:
    """One mutex per entity key, alive only while someone holds or waits on it.

    Services wrap check-then-act sequences (QR scan, fee payment) in
    ``hold(kind, *ids)`` so two requests against the same entity serialize while
    requests against different entities proceed. Entity locks are always taken
    before the store lock.
    """

    def __init__(self):
        self._guard = threading.Lock()
        # key -> [lock, number of holders and waiters]
        self._locks: Dict[Tuple[Hashable, ...], List] = {}

    def _acquire_slot(self, key: Tuple[Hashable, ...]) -> threading.Lock:
        with self._guard:
            slot = self._locks.get(key)
            if slot is None:
                slot = [threading.Lock(), 0]
                self._locks[key] = slot
            slot[1] += 1
            return slot[0]

    def _release_slot(self, key: Tuple[Hashable, ...]) -> None:
        with self._guard:
            slot = self._locks[key]
            slot[1] -= 1
            if slot[1] == 0:
                del self._locks[key]

    @contextmanager
    def hold(self, kind: str, *ids: Hashable) -> Iterator[None]:
        key = (kind, *ids)
        lock = self._acquire_slot(key)
        try:
            with lock:
                yield
        finally:
            self._release_slot(key)

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
