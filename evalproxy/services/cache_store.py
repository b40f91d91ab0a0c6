import time
from contextlib import contextmanager
from dataclasses import dataclass
from threading import Lock
from typing import Any, Callable, Dict, Hashable, List, Optional, Tuple


@dataclass(frozen=True)
class CacheEntry:
    value: Any
    fetched_at: float


class CacheStore:
    """In-memory read-through cache with a TTL and per-key single-flight loading.

    Entries are keyed by ``(namespace, key)``, e.g. ``("posts", "42")``.
    Only successful loads are stored; a loader that raises leaves the slot
    untouched. While one caller is loading a key, other callers for the same
    key block on its lock and then read the fresh entry instead of loading
    again. A key's lock only exists while someone is loading or waiting on it.
    """

    def __init__(self, ttl_seconds: float = 300, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl_seconds
        self.clock = clock
        self._store: Dict[Tuple[str, Hashable], CacheEntry] = {}
        # slot -> [lock, number of callers holding or waiting on it]
        self._key_locks: Dict[Tuple[str, Hashable], List[Any]] = {}
        self._locks_guard = Lock()

    def _is_valid(self, entry: Optional[CacheEntry]) -> bool:
        return entry is not None and self.clock() - entry.fetched_at < self.ttl

    @contextmanager
    def _slot_lock(self, slot: Tuple[str, Hashable]):
        with self._locks_guard:
            holder = self._key_locks.setdefault(slot, [Lock(), 0])
            holder[1] += 1
        try:
            with holder[0]:
                yield
        finally:
            with self._locks_guard:
                holder[1] -= 1
                if holder[1] == 0:
                    del self._key_locks[slot]

    @property
    def in_flight(self) -> int:
        """Number of keys currently being loaded or waited on."""
        with self._locks_guard:
            return len(self._key_locks)

    def get_or_load(self, namespace: str, loader: Callable[[], Any], key: Hashable = None) -> Any:
        slot = (namespace, key)
        entry = self._store.get(slot)
        if self._is_valid(entry):
            return entry.value

        with self._slot_lock(slot):
            # another caller may have filled the slot while we waited
            entry = self._store.get(slot)
            if self._is_valid(entry):
                return entry.value
            value = loader()
            self._store[slot] = CacheEntry(value, self.clock())
            return value
