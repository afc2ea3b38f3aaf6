"""
Generic whole-collection record store.

A ``RecordStore`` owns one collection.  Every operation reads the full
collection from its backend, works on the in-memory copy and, for
mutations, writes the full collection back.  This costs O(n) per
operation and is only suitable for the small, mostly static data of an
admin tool.

Writers are serialised per store with an ``asyncio.Lock`` held across
the read-modify-write, so two concurrent ``create`` calls in the same
process cannot allocate the same id or discard each other's change.
Fields named in ``unique_fields`` are checked inside the same lock
hold, so concurrent writers cannot both claim one value.
The lock does not extend across processes: running several server
processes against the same data directory brings the lost-update race
back, which is why the server runs a single worker.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..core.db import CollectionBackend, Record

logger = logging.getLogger(__name__)

SeedFactory = Callable[[], List[Record]]


def utc_now_iso() -> str:
    """Current UTC time as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def next_id(records: List[Record]) -> int:
    """Return ``1 + max(existing ids)``, or ``1`` for an empty collection."""
    ids = [r["id"] for r in records if isinstance(r.get("id"), int)]
    return max(ids) + 1 if ids else 1


class DuplicateRecord(ValueError):
    """A value of a unique field is already used by another record."""

    def __init__(self, field: str, value: Any) -> None:
        super().__init__(value)
        self.field = field
        self.value = value


class RecordStore:
    """Load, mutate and persist one collection of dict records."""

    #: Short name used in log messages.
    name = "records"
    #: Fields whose values no two records may share.
    unique_fields: Tuple[str, ...] = ()
    #: Raised by ``create`` and ``update`` when a unique value is taken.
    duplicate_error = DuplicateRecord

    def __init__(self, backend: CollectionBackend, seed: Optional[SeedFactory] = None) -> None:
        self.backend = backend
        self._seed = seed
        self._lock = asyncio.Lock()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.backend!r})"

    # ------------------------------------------------------------------
    # Hooks for entity stores
    # ------------------------------------------------------------------
    def prepare_new(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Adjust the fields of a record about to be created."""
        return fields

    def prepare_update(self, current: Record, updates: Dict[str, Any]) -> Dict[str, Any]:
        """Adjust a partial update before it is merged into ``current``."""
        return updates

    # ------------------------------------------------------------------
    # Backend access
    # ------------------------------------------------------------------
    async def _read(self) -> List[Record]:
        return await asyncio.to_thread(self.backend.read)

    async def _write(self, records: List[Record]) -> None:
        await asyncio.to_thread(self.backend.write, records)

    def _check_unique(self, records: List[Record], candidate: Record) -> None:
        for field in self.unique_fields:
            value = candidate.get(field)
            if value is None:
                continue
            for record in records:
                if record.get("id") != candidate.get("id") and record.get(field) == value:
                    raise self.duplicate_error(field, value)

    # ------------------------------------------------------------------
    # Contract
    # ------------------------------------------------------------------
    async def ensure_initialized(self) -> None:
        """Seed the collection if it does not exist yet.  Never overwrites."""
        if self.backend.exists():
            return
        async with self._lock:
            seed = self._seed() if self._seed is not None else []
            created = await asyncio.to_thread(self.backend.create_if_absent, seed)
        if created:
            logger.info("Initialised %s collection with %d record(s)", self.name, len(seed))

    async def load_all(self) -> List[Record]:
        """Return the whole collection in stored order."""
        return await self._read()

    async def get_by_id(self, record_id: int) -> Optional[Record]:
        return await self.get_by_field("id", record_id)

    async def get_by_field(self, field: str, value: Any) -> Optional[Record]:
        """Return the first record whose ``field`` equals ``value``."""
        for record in await self._read():
            if record.get(field) == value:
                return record
        return None

    async def create(self, fields: Dict[str, Any]) -> Record:
        async with self._lock:
            records = await self._read()
            now = utc_now_iso()
            prepared = self.prepare_new(dict(fields))
            prepared.pop("id", None)
            record = {"id": next_id(records), **prepared}
            record["createdAt"] = now
            record["updatedAt"] = now
            self._check_unique(records, record)
            records.append(record)
            await self._write(records)
        logger.debug("Created %s record %s", self.name, record["id"])
        return record

    async def update(self, record_id: int, updates: Dict[str, Any]) -> Optional[Record]:
        """Shallow-merge ``updates`` into the record and refresh ``updatedAt``."""
        async with self._lock:
            records = await self._read()
            for index, current in enumerate(records):
                if current.get("id") == record_id:
                    break
            else:
                return None
            changes = self.prepare_update(current, dict(updates))
            changes.pop("id", None)
            merged = {**current, **changes, "updatedAt": utc_now_iso()}
            self._check_unique(records, merged)
            records[index] = merged
            await self._write(records)
        logger.debug("Updated %s record %s (%s)", self.name, record_id, ", ".join(sorted(changes)))
        return merged

    async def delete(self, record_id: int) -> bool:
        """Remove the record; return whether anything was removed."""
        async with self._lock:
            records = await self._read()
            remaining = [r for r in records if r.get("id") != record_id]
            if len(remaining) == len(records):
                return False
            await self._write(remaining)
        logger.debug("Deleted %s record %s", self.name, record_id)
        return True

    async def replace_all(self, records: List[Record]) -> None:
        """Persist ``records`` as the complete collection."""
        async with self._lock:
            await self._write(list(records))
