"""Collapse duplicate reading_progress rows so each (user_id, book_id) pair keeps one record.

The most recently read row wins. Run with the same environment as the server so it
targets the same storage backend.
"""
from myb.core.config import settings
from myb.services.tables import Tables
from myb.storage import build_store


def dedupe(records: list[dict]) -> tuple[list[dict], int]:
    keep: dict[tuple[str, str], dict] = {}
    order: list[tuple[str, str]] = []
    for record in records:
        key = (str(record.get("user_id")), str(record.get("book_id")))
        if key not in keep:
            order.append(key)
            keep[key] = record
        elif (record.get("last_read") or "") >= (keep[key].get("last_read") or ""):
            keep[key] = record
    kept = [keep[key] for key in order]
    return kept, len(records) - len(kept)


def main() -> None:
    tables = Tables(build_store(settings))
    try:
        with tables["reading_progress"].editing() as records:
            kept, removed = dedupe(records)
            records[:] = kept
        print(f"Removed {removed} duplicate progress records")
    finally:
        tables.close()


if __name__ == "__main__":
    main()
