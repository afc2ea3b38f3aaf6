"""
Collection backends for the record stores.

Every entity kind (users, products, activity logs) is persisted as a
single JSON document holding an ordered array of records.  The stores
never touch the filesystem directly; they go through a
``CollectionBackend`` which knows how to read, replace and seed one
collection.  ``JsonFileBackend`` is the production backend;
``MemoryBackend`` keeps the collection in process memory and is used by
the test suite.  Replacing the JSON files with an embedded database
means writing another backend, not changing the stores or the routes.
"""

import copy
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

logger = logging.getLogger(__name__)

Record = Dict[str, Any]


class StoreUnavailable(Exception):
    """The backing medium of a collection could not be read or written."""


class CollectionBackend(ABC):
    """Persistence contract for one collection."""

    @abstractmethod
    def exists(self) -> bool:
        """Return ``True`` if a persisted collection is present."""

    @abstractmethod
    def read(self) -> List[Record]:
        """Return the full collection.

        Raises ``StoreUnavailable`` if the medium is unreadable or the
        document is malformed.  Partial results are never returned.
        """

    @abstractmethod
    def write(self, records: List[Record]) -> None:
        """Replace the whole collection with ``records``."""

    @abstractmethod
    def create_if_absent(self, records: List[Record]) -> bool:
        """Persist ``records`` only if no collection exists yet.

        Returns ``True`` if the collection was created by this call.
        """


class JsonFileBackend(CollectionBackend):
    """A collection stored as a JSON array in a single file.

    Writes go to a temporary file in the same directory which is then
    moved over the target with ``os.replace``, so a concurrent reader
    sees either the previous or the new document, never a torn one.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def __repr__(self) -> str:
        return f"JsonFileBackend({str(self.path)!r})"

    def exists(self) -> bool:
        return self.path.exists()

    def read(self) -> List[Record]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            raise StoreUnavailable(f"Cannot read collection {self.path}: {exc}") from exc
        if not isinstance(data, list):
            raise StoreUnavailable(f"Collection {self.path} is not a JSON array")
        return data

    def _write_temp(self, records: List[Record]) -> str:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent)
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(records, f, indent=2, ensure_ascii=False)
                f.flush()
                os.fsync(f.fileno())
        except BaseException:
            os.unlink(tmp_path)
            raise
        return tmp_path

    def write(self, records: List[Record]) -> None:
        try:
            tmp_path = self._write_temp(records)
            os.replace(tmp_path, self.path)
        except OSError as exc:
            raise StoreUnavailable(f"Cannot write collection {self.path}: {exc}") from exc

    def create_if_absent(self, records: List[Record]) -> bool:
        if self.path.exists():
            return False
        try:
            tmp_path = self._write_temp(records)
        except OSError as exc:
            raise StoreUnavailable(f"Cannot seed collection {self.path}: {exc}") from exc
        try:
            # link() refuses to overwrite, so a collection created by
            # someone else in the meantime is left untouched.
            os.link(tmp_path, self.path)
            return True
        except FileExistsError:
            return False
        except OSError as exc:
            raise StoreUnavailable(f"Cannot seed collection {self.path}: {exc}") from exc
        finally:
            os.unlink(tmp_path)


class MemoryBackend(CollectionBackend):
    """A collection held in memory.  Records are copied on the way in and out."""

    def __init__(self, records: Optional[List[Record]] = None) -> None:
        self._records: Optional[List[Record]] = copy.deepcopy(records) if records is not None else None

    def exists(self) -> bool:
        return self._records is not None

    def read(self) -> List[Record]:
        if self._records is None:
            raise StoreUnavailable("Collection has not been initialised")
        return copy.deepcopy(self._records)

    def write(self, records: List[Record]) -> None:
        self._records = copy.deepcopy(records)

    def create_if_absent(self, records: List[Record]) -> bool:
        if self._records is not None:
            return False
        self._records = copy.deepcopy(records)
        return True
