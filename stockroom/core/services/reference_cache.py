"""TTL cache in front of a reference resolver."""

import time
from collections.abc import Callable

from stockroom.core.entities.reference import ReferenceKind
from stockroom.core.interfaces.reference_resolver import IReferenceResolver


class CachedReferenceResolver(IReferenceResolver):
    """
    Caches successful lookups for ``ttl`` seconds.

    Misses are not cached so a newly created supplier or location becomes
    resolvable immediately.
    """

    def __init__(
        self,
        inner: IReferenceResolver,
        ttl: float = 300.0,
        max_size: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._inner = inner
        self._ttl = ttl
        self._max_size = max_size
        self._clock = clock
        self._entries: dict[tuple[ReferenceKind, str], tuple[int, float]] = {}

    async def resolve(self, kind: ReferenceKind, label: str | None) -> int | None:
        if not label:
            return None

        key = (kind, label)
        entry = self._entries.get(key)
        if entry is not None:
            entity_id, expires_at = entry
            if expires_at > self._clock():
                return entity_id
            del self._entries[key]

        entity_id = await self._inner.resolve(kind, label)
        if entity_id is not None:
            if len(self._entries) >= self._max_size:
                # Evict the oldest insertion
                self._entries.pop(next(iter(self._entries)))
            self._entries[key] = (entity_id, self._clock() + self._ttl)
        return entity_id
