from dedupe_progress import dedupe


def test_dedupe_keeps_latest_record_per_pair():
    records = [
        {"id": "a", "user_id": "u1", "book_id": "b1", "last_read": "2024-01-01"},
        {"id": "b", "user_id": "u1", "book_id": "b2", "last_read": "2024-01-02"},
        {"id": "c", "user_id": "u1", "book_id": "b1", "last_read": "2024-03-01"},
        {"id": "d", "user_id": "u2", "book_id": "b1", "last_read": "2024-01-01"},
    ]

    kept, removed = dedupe(records)

    assert removed == 1
    assert [r["id"] for r in kept] == ["c", "b", "d"]
