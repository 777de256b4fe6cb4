"""Flat-file JSON persistence for the catalog and the ledger.

Each collection lives in its own file, either as a bare list of records or
wrapped in an object under a named key (``{"productos": [...]}``,
``{"movements": [...]}``). Whichever shape a file already has is kept on
write; a missing file starts out wrapped.

Every read-modify-write cycle on a file runs under one re-entrant lock per
path, shared by all stores pointing at that path, and writes go through a
temp file + replace. The API process is expected to be the only writer.
"""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from threading import Lock, RLock
from typing import Any, Callable, Generic, Iterable, Iterator, TypeVar

from stockledger.domain import Movement, Product, clean_text
from stockledger.errors import StorageError

logger = logging.getLogger(__name__)

PRODUCTS_KEY = "productos"
MOVEMENTS_KEY = "movements"

_registry_lock = Lock()
_path_locks: dict[Path, RLock] = {}


def _lock_for(path: Path) -> RLock:
    key = path.resolve()
    with _registry_lock:
        lock = _path_locks.get(key)
        if lock is None:
            lock = _path_locks[key] = RLock()
        return lock


@dataclass
class JsonDocument:
    """A loaded file: its records plus what is needed to write it back as found."""

    records: list[dict[str, Any]]
    wrapped: bool = True
    extra: dict[str, Any] = field(default_factory=dict)


class JsonCollectionStore:
    def __init__(self, path: Path | str, wrapper_key: str) -> None:
        self.path = Path(path)
        self.wrapper_key = wrapper_key
        self.lock = _lock_for(self.path)

    def load(self) -> JsonDocument:
        with self.lock:
            try:
                text = self.path.read_text(encoding="utf-8")
            except FileNotFoundError:
                return JsonDocument(records=[])
            except OSError as exc:
                logger.error("Could not read %s: %s", self.path, exc)
                raise StorageError(f"Could not read {self.path}") from exc

            if not text.strip():
                return JsonDocument(records=[])
            try:
                raw = json.loads(text)
            except json.JSONDecodeError as exc:
                logger.error("Invalid JSON in %s: %s", self.path, exc)
                raise StorageError(f"Invalid JSON in {self.path}") from exc

            return self._to_document(raw)

    def _to_document(self, raw: Any) -> JsonDocument:
        if isinstance(raw, list):
            document = JsonDocument(records=raw, wrapped=False)
        elif isinstance(raw, dict):
            extra = {k: v for k, v in raw.items() if k != self.wrapper_key}
            records = raw.get(self.wrapper_key) or []
            if not isinstance(records, list):
                raise StorageError(f"'{self.wrapper_key}' in {self.path} is not a list")
            document = JsonDocument(records=records, wrapped=True, extra=extra)
        else:
            raise StorageError(f"Unexpected JSON document in {self.path}")

        if not all(isinstance(record, dict) for record in document.records):
            raise StorageError(f"Non-object record in {self.path}")
        return document

    def save(self, document: JsonDocument) -> None:
        if document.wrapped:
            payload: Any = {**document.extra, self.wrapper_key: document.records}
        else:
            payload = document.records

        with self.lock:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                temp_path = self.path.with_suffix(self.path.suffix + ".tmp")
                temp_path.write_text(
                    json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8"
                )
                temp_path.replace(self.path)
            except OSError as exc:
                logger.error("Could not write %s: %s", self.path, exc)
                raise StorageError(f"Could not write {self.path}") from exc

    @contextmanager
    def mutate(self) -> Iterator[list[dict[str, Any]]]:
        """Yield the records for in-place edits; written back unless an error escapes."""
        with self.lock:
            document = self.load()
            yield document.records
            self.save(document)


RecordT = TypeVar("RecordT", Product, Movement)


class _JsonRepository(Generic[RecordT]):
    key_field: str
    prepend_new: bool
    from_record: Callable[[dict[str, Any]], RecordT]

    def __init__(self, store: JsonCollectionStore) -> None:
        self.store = store

    def list(self) -> list[RecordT]:
        return [self.from_record(record) for record in self.store.load().records]

    def get(self, key: str) -> RecordT | None:
        for record in self.store.load().records:
            if clean_text(record.get(self.key_field)) == key:
                return self.from_record(record)
        return None

    def put(self, item: RecordT) -> None:
        key = getattr(item, self.key_field)
        with self.store.mutate() as records:
            for index, record in enumerate(records):
                if clean_text(record.get(self.key_field)) == key:
                    records[index] = item.to_record()
                    return
            if self.prepend_new:
                records.insert(0, item.to_record())
            else:
                records.append(item.to_record())

    def remove(self, key: str) -> bool:
        with self.store.mutate() as records:
            kept = [record for record in records if clean_text(record.get(self.key_field)) != key]
            removed = len(kept) != len(records)
            records[:] = kept
        return removed

    def replace_all(self, items: Iterable[RecordT]) -> None:
        with self.store.mutate() as records:
            records[:] = [item.to_record() for item in items]

    def write_lock(self) -> RLock:
        return self.store.lock


class JsonProductRepository(_JsonRepository[Product]):
    key_field = "sku"
    prepend_new = False
    from_record = staticmethod(Product.from_record)

    @classmethod
    def at(cls, path: Path | str) -> JsonProductRepository:
        return cls(JsonCollectionStore(path, PRODUCTS_KEY))


class JsonMovementRepository(_JsonRepository[Movement]):
    key_field = "id"
    prepend_new = True
    from_record = staticmethod(Movement.from_record)

    @classmethod
    def at(cls, path: Path | str) -> JsonMovementRepository:
        return cls(JsonCollectionStore(path, MOVEMENTS_KEY))
