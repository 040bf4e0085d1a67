from myb.core.config import Settings
from myb.storage.base import COLLECTIONS, Record, RecordStore
from myb.storage.json_store import JsonFileStore
from myb.storage.sql_store import SqlRecordStore


def build_store(settings: Settings) -> RecordStore:
    backend = settings.storage_backend.lower()
    if backend == "json":
        return JsonFileStore(settings.data_dir)
    if backend == "sql":
        return SqlRecordStore(settings.database_url)
    raise ValueError(f"Unsupported storage backend: {settings.storage_backend}")


__all__ = [
    "COLLECTIONS",
    "Record",
    "RecordStore",
    "JsonFileStore",
    "SqlRecordStore",
    "build_store",
]
