import base64
from myb.client import catalog

BOOKS = [
    {"id": "1", "title": "Alpha", "author": "Zed", "genre": "Fantasy", "reads": 5, "rating": 4.1, "published": True, "published_date": "2023-01-01"},
    {"id": "2", "title": "beta", "author": "Yan", "genre": "Drama", "reads": 50, "rating": 3.0, "published": True, "published_date": "2024-06-01", "status": "completed"},
    {"id": "3", "title": "Gamma", "author": "Xi", "genre": "Fantasy", "reads": 1, "rating": 4.9, "published": False, "featured": True},
]


def test_visible_books_hides_drafts_from_readers():
    assert [b["id"] for b in catalog.visible_books(BOOKS, is_admin=False)] == ["1", "2"]
    assert len(catalog.visible_books(BOOKS, is_admin=True)) == 3


def test_filter_books():
    assert [b["id"] for b in catalog.filter_books(BOOKS, genre="Fantasy")] == ["1", "3"]
    assert [b["id"] for b in catalog.filter_books(BOOKS, status="completed")] == ["2"]
    assert [b["id"] for b in catalog.filter_books(BOOKS, query="YAN")] == ["2"]
    assert [b["id"] for b in catalog.filter_books(BOOKS, query="fant")] == ["1", "3"]


def test_sort_books():
    assert [b["id"] for b in catalog.sort_books(BOOKS, "popular")] == ["2", "1", "3"]
    assert [b["id"] for b in catalog.sort_books(BOOKS, "rating")] == ["3", "1", "2"]
    assert [b["id"] for b in catalog.sort_books(BOOKS, "title")] == ["1", "2", "3"]
    assert [b["id"] for b in catalog.sort_books(BOOKS, "recent")] == ["2", "1", "3"]


def test_genres_and_featured():
    assert catalog.genres(BOOKS) == ["Drama", "Fantasy"]
    assert [b["id"] for b in catalog.featured_books(BOOKS)] == ["3"]


def test_chapters_for_book_orders_by_number():
    chapters = [
        {"id": "c3", "book_id": "1", "chapter_number": 3},
        {"id": "x", "book_id": "2", "chapter_number": 1},
        {"id": "c1", "book_id": "1", "chapter_number": 1},
        {"id": "c10", "book_id": "1", "chapter_number": 10},
    ]

    assert [c["id"] for c in catalog.chapters_for_book(chapters, "1")] == ["c1", "c3", "c10"]


def test_progress_by_book_keeps_latest_per_book():
    records = [
        {"id": "p1", "user_id": "u1", "book_id": "1", "last_read": "2024-01-01T00:00:00.000Z"},
        {"id": "p2", "user_id": "u1", "book_id": "1", "last_read": "2024-02-01T00:00:00.000Z"},
        {"id": "p3", "user_id": "u2", "book_id": "1", "last_read": "2024-03-01T00:00:00.000Z"},
        {"id": "p4", "user_id": "u1", "book_id": "2", "last_read": "2024-01-05T00:00:00.000Z"},
    ]

    latest = catalog.progress_by_book(records, "u1")

    assert {k: v["id"] for k, v in latest.items()} == {"1": "p2", "2": "p4"}


def test_purchases_comments_and_users():
    purchases = [{"user_id": "u1", "book_id": "1"}, {"user_id": "u2", "book_id": "2"}]
    assert catalog.purchased_book_ids(purchases, "u1") == {"1"}

    comments = [{"book_id": "1", "created_at": "a"}, {"book_id": "1", "created_at": "b"}, {"book_id": "2"}]
    assert [c["created_at"] for c in catalog.comments_for_book(comments, "1")] == ["b", "a"]

    users = [{"id": "u1", "email": "Ann@Example.com"}]
    assert catalog.find_user_by_email(users, " ann@example.com")["id"] == "u1"
    assert catalog.find_user_by_email(users, "bob@example.com") is None


def test_to_data_uri_guesses_mime():
    uri = catalog.to_data_uri("cover.png", b"\x89PNG")

    assert uri.startswith("data:image/png;base64,")
    assert base64.b64decode(uri.split(",", 1)[1]) == b"\x89PNG"


def test_downloadable_books_need_purchase_and_pdf():
    books = [
        {"id": "1", "pdf_url": "/uploads/1-a.pdf"},
        {"id": "2", "pdf_url": ""},
        {"id": "3", "pdf_url": "/uploads/3-c.pdf"},
    ]

    assert [b["id"] for b in catalog.downloadable_books(books, {"1", "2"})] == ["1"]
