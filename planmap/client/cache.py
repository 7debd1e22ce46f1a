"""Client-side query cache keyed by tuples such as ``("nodes", mindmap_id)``."""
from __future__ import annotations

import copy
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

QueryKey = Tuple[str, ...]


@dataclass
class CacheEntry:
    data: Any
    updated_at: float
    stale: bool = False
    generation: int = 0


@dataclass(frozen=True)
class CacheSnapshot:
    """Deep copy of one entry taken before an optimistic write."""
    key: QueryKey
    data: Any
    existed: bool


def _matches(key: QueryKey, prefix: QueryKey) -> bool:
    return key[:len(prefix)] == prefix


class QueryCache:
    """Explicit cache service; one instance per client, passed to whoever needs it."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._entries: Dict[QueryKey, CacheEntry] = {}
        self._generations: Dict[QueryKey, int] = {}
        self._clock = clock

    def get(self, key: QueryKey) -> Any:
        entry = self._entries.get(key)
        return entry.data if entry else None

    def has(self, key: QueryKey) -> bool:
        return key in self._entries

    def set(self, key: QueryKey, data: Any) -> None:
        generation = self._bump(key)
        self._entries[key] = CacheEntry(data=data, updated_at=self._clock(), generation=generation)

    def generation(self, key: QueryKey) -> int:
        """Changes every time the entry is written, restored or removed."""
        return self._generations.get(key, 0)

    def set_if_current(self, key: QueryKey, data: Any, generation: int) -> bool:
        """Store a fetch result only if nothing touched the key since the fetch began."""
        if self.generation(key) != generation:
            logger.debug(f"Discarding outdated response for {key}")
            return False
        self.set(key, data)
        return True

    def is_stale(self, key: QueryKey, stale_time: float | None = None) -> bool:
        entry = self._entries.get(key)
        if entry is None or entry.stale:
            return True
        if stale_time is None:
            return False
        return self._clock() - entry.updated_at >= stale_time

    def invalidate(self, prefix: QueryKey) -> int:
        """Mark every entry under ``prefix`` stale; returns how many were marked."""
        count = 0
        for key, entry in self._entries.items():
            if _matches(key, prefix):
                entry.stale = True
                count += 1
        return count

    def find_all(self, prefix: QueryKey) -> List[Tuple[QueryKey, Any]]:
        return [(key, entry.data) for key, entry in self._entries.items() if _matches(key, prefix)]

    def remove(self, key: QueryKey) -> None:
        if key in self._entries:
            del self._entries[key]
            self._bump(key)

    def snapshot(self, key: QueryKey) -> CacheSnapshot:
        entry = self._entries.get(key)
        return CacheSnapshot(
            key=key,
            data=copy.deepcopy(entry.data) if entry else None,
            existed=entry is not None,
        )

    def restore(self, snapshot: CacheSnapshot) -> None:
        if snapshot.existed:
            self.set(snapshot.key, copy.deepcopy(snapshot.data))
        else:
            self.remove(snapshot.key)

    def clear(self) -> None:
        for key in list(self._entries):
            self.remove(key)

    def _bump(self, key: QueryKey) -> int:
        generation = self._generations.get(key, 0) + 1
        self._generations[key] = generation
        return generation
