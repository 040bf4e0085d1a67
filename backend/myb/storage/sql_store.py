import json
import logging
import os
from sqlalchemy import create_engine, delete, select
from sqlalchemy.orm import sessionmaker
from myb.models import Base, StoredRecord
from myb.storage.base import Record, RecordStore, check_collection

logger = logging.getLogger(__name__)


def _ensure_sqlite_dir(database_url: str) -> None:
    prefix = "sqlite:///"
    if database_url.startswith(prefix) and database_url != "sqlite:///:memory:":
        directory = os.path.dirname(database_url[len(prefix):])
        if directory:
            os.makedirs(directory, exist_ok=True)


class SqlRecordStore(RecordStore):
    """Same whole-collection contract, backed by one ``records`` table.

    ``save`` replaces a collection's rows inside a single transaction.
    """

    def __init__(self, database_url: str) -> None:
        _ensure_sqlite_dir(database_url)
        connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
        self.engine = create_engine(database_url, future=True, connect_args=connect_args)
        self.SessionLocal = sessionmaker(bind=self.engine, autoflush=False, autocommit=False, future=True)
        Base.metadata.create_all(self.engine)

    def load(self, collection: str) -> list[Record]:
        check_collection(collection)
        with self.SessionLocal() as db:
            rows = db.scalars(
                select(StoredRecord).where(StoredRecord.collection == collection).order_by(StoredRecord.position)
            ).all()
        records = []
        for row in rows:
            try:
                value = json.loads(row.payload)
            except ValueError:
                logger.warning("Skipping unreadable record", extra={"collection": collection, "row_id": row.id})
                continue
            if isinstance(value, dict):
                records.append(value)
        return records

    def save(self, collection: str, records: list[Record]) -> None:
        check_collection(collection)
        with self.SessionLocal.begin() as db:
            db.execute(delete(StoredRecord).where(StoredRecord.collection == collection))
            db.add_all(
                StoredRecord(
                    collection=collection,
                    position=position,
                    record_id=str(record["id"]) if record.get("id") is not None else None,
                    payload=json.dumps(record, ensure_ascii=False),
                )
                for position, record in enumerate(records)
            )

    def close(self) -> None:
        self.engine.dispose()
