"""
In-process keyed lock

Serializes coroutines that share a key (e.g. an event id) while letting
different keys run concurrently. Entries are reference counted and dropped
once no coroutine holds or waits on them, so the map never grows with the
number of keys ever seen.

This only orders work inside one process. Cross-process correctness comes
from the guarded UPDATE statements in the repositories.
"""

from collections.abc import AsyncIterator, Hashable
from contextlib import asynccontextmanager

import anyio


class _LockEntry:
    __slots__ = ('lock', 'users')

    def __init__(self) -> None:
        self.lock = anyio.Lock()
        self.users = 0


class KeyedLock:
    def __init__(self) -> None:
        self._entries: dict[Hashable, _LockEntry] = {}

    @asynccontextmanager
    async def hold(self, key: Hashable) -> AsyncIterator[None]:
        entry = self._entries.get(key)
        if entry is None:
            entry = self._entries[key] = _LockEntry()
        entry.users += 1
        try:
            async with entry.lock:
                yield
        finally:
            entry.users -= 1
            if entry.users == 0 and self._entries.get(key) is entry:
                del self._entries[key]

    def is_held(self, key: Hashable) -> bool:
        entry = self._entries.get(key)
        return entry is not None and entry.lock.locked()

    def __len__(self) -> int:
        return len(self._entries)
