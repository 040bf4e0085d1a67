from abc import ABC, abstractmethod
from typing import Any

Record = dict[str, Any]

COLLECTIONS = (
    "books",
    "users",
    "chapters",
    "purchases",
    "reading_progress",
    "reports",
    "comments",
)


def check_collection(name: str) -> str:
    if name not in COLLECTIONS:
        raise KeyError(f"Unknown collection: {name}")
    return name


class RecordStore(ABC):
    """Whole-collection storage: callers load everything, mutate a copy, save everything back.

    There is no partial-row primitive. ``load`` never fails for a missing or unreadable
    collection; it yields an empty list instead.
    """

    @abstractmethod
    def load(self, collection: str) -> list[Record]:
        ...

    @abstractmethod
    def save(self, collection: str, records: list[Record]) -> None:
        ...

    def close(self) -> None:
        pass
