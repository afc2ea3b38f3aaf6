"""
Activity log collection (``logs.json``).

The log is stored newest first and capped: inserting an entry past the
cap evicts the oldest entries.  Entries reference accounts only by
``userId``; the account may since have been deleted.
"""

from typing import Any, Dict, List

from ..core.db import CollectionBackend, Record
from .base import RecordStore, next_id, utc_now_iso

DEFAULT_CAP = 1000


class AuditStore(RecordStore):
    """Capped, newest-first store for activity entries."""

    name = "logs"

    def __init__(self, backend: CollectionBackend, cap: int = DEFAULT_CAP) -> None:
        super().__init__(backend, seed=list)
        if cap < 1:
            raise ValueError("cap must be at least 1")
        self.cap = cap

    async def record(self, fields: Dict[str, Any]) -> Record:
        """Insert an entry at the head of the log and evict past the cap."""
        async with self._lock:
            entries = await self._read()
            fields = dict(fields)
            fields.pop("id", None)
            entry = {"id": next_id(entries), **fields, "timestamp": utc_now_iso()}
            entries.insert(0, entry)
            del entries[self.cap:]
            await self._write(entries)
        return entry

    async def create(self, fields: Dict[str, Any]) -> Record:
        return await self.record(fields)

    async def enforce_cap(self) -> int:
        """Trim a log that grew past the cap (e.g. after the cap was lowered).

        Returns the number of evicted entries.
        """
        entries = await self.load_all()
        excess = len(entries) - self.cap
        if excess <= 0:
            return 0
        await self.replace_all(entries[:self.cap])
        return excess

    async def recent(self, limit: int = 10) -> List[Record]:
        if limit <= 0:
            return []
        return (await self.load_all())[:limit]
