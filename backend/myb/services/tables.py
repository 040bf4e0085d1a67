import logging
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any
from myb.core.errors import InvalidPayload, NotFound
from myb.core.ids import new_id
from myb.storage import COLLECTIONS, Record, RecordStore

logger = logging.getLogger(__name__)

RecordCheck = Callable[[Record], None]


def find_index(records: list[Record], record_id: str) -> int:
    # ids compare as strings; numeric-looking ids from old data still match
    target = str(record_id)
    for index, record in enumerate(records):
        if str(record.get("id")) == target:
            return index
    return -1


class Table:
    """One collection, with every read-modify-write serialised by a process-local lock.

    Two server processes pointed at the same storage can still overwrite each other's
    changes; within one process no update is lost.
    """

    def __init__(self, store: RecordStore, name: str, lock: threading.RLock) -> None:
        self.store = store
        self.name = name
        self._lock = lock

    def all(self) -> list[Record]:
        return self.store.load(self.name)

    def get(self, record_id: str) -> Record:
        records = self.all()
        index = find_index(records, record_id)
        if index == -1:
            raise NotFound()
        return records[index]

    def exists(self, record_id: str) -> bool:
        return find_index(self.all(), record_id) != -1

    @contextmanager
    def editing(self) -> Iterator[list[Record]]:
        """Hold the lock, yield the loaded rows, and save them back if the block succeeds."""
        with self._lock:
            records = self.store.load(self.name)
            yield records
            self.store.save(self.name, records)

    def insert(
        self,
        fields: dict[str, Any],
        defaults: dict[str, Any] | None = None,
        prepend: bool = False,
        check: Callable[[list[Record]], None] | None = None,
    ) -> Record:
        record = {"id": new_id(), **(defaults or {}), **fields}
        with self.editing() as records:
            if check:
                check(records)
            if prepend:
                records.insert(0, record)
            else:
                records.append(record)
        logger.info("Record created", extra={"collection": self.name, "record_id": record["id"]})
        return record

    def update(self, record_id: str, changes: dict[str, Any], check: RecordCheck | None = None) -> Record:
        with self.editing() as records:
            index = find_index(records, record_id)
            if index == -1:
                raise NotFound()
            if check:
                check(records[index])
            records[index] = {**records[index], **changes}
            updated = records[index]
        logger.info(
            "Record updated",
            extra={"collection": self.name, "record_id": record_id, "fields": sorted(changes)},
        )
        return updated

    def increment(self, record_id: str, field: str, by: int = 1) -> Record:
        with self.editing() as records:
            index = find_index(records, record_id)
            if index == -1:
                raise NotFound()
            try:
                current = int(float(records[index].get(field) or 0))
            except (TypeError, ValueError, OverflowError):
                raise InvalidPayload(f"{field} is not a number") from None
            records[index] = {**records[index], field: current + by}
            updated = records[index]
        return updated

    def delete(self, record_id: str, check: RecordCheck | None = None) -> Record:
        with self.editing() as records:
            index = find_index(records, record_id)
            if index == -1:
                raise NotFound()
            if check:
                check(records[index])
            removed = records.pop(index)
        logger.info("Record deleted", extra={"collection": self.name, "record_id": record_id})
        return removed


class Tables:
    def __init__(self, store: RecordStore) -> None:
        self.store = store
        self._tables = {name: Table(store, name, threading.RLock()) for name in COLLECTIONS}

    def __getitem__(self, name: str) -> Table:
        return self._tables[name]

    @property
    def books(self) -> Table:
        return self._tables["books"]

    def close(self) -> None:
        self.store.close()
