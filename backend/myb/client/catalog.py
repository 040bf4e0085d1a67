import base64
import mimetypes
from collections.abc import Iterable

SORT_KEYS = ("popular", "recent", "rating", "title")


def visible_books(books: Iterable[dict], is_admin: bool) -> list[dict]:
    return [book for book in books if is_admin or book.get("published")]


def filter_books(
    books: Iterable[dict],
    genre: str | None = None,
    status: str | None = None,
    query: str | None = None,
) -> list[dict]:
    result = list(books)
    if genre:
        result = [book for book in result if book.get("genre") == genre]
    if status:
        result = [book for book in result if book.get("status") == status]
    if query:
        needle = query.strip().lower()
        result = [
            book
            for book in result
            if needle in (book.get("title") or "").lower()
            or needle in (book.get("author") or "").lower()
            or needle in (book.get("genre") or "").lower()
        ]
    return result


def sort_books(books: Iterable[dict], sort: str = "popular") -> list[dict]:
    books = list(books)
    if sort == "popular":
        return sorted(books, key=lambda book: book.get("reads") or 0, reverse=True)
    if sort == "recent":
        return sorted(books, key=lambda book: book.get("published_date") or book.get("created_at") or "", reverse=True)
    if sort == "rating":
        return sorted(books, key=lambda book: book.get("rating") or 0, reverse=True)
    if sort == "title":
        return sorted(books, key=lambda book: (book.get("title") or "").lower())
    return books


def featured_books(books: Iterable[dict], limit: int = 6) -> list[dict]:
    return [book for book in books if book.get("featured")][:limit]


def genres(books: Iterable[dict]) -> list[str]:
    return sorted({book["genre"] for book in books if book.get("genre")})


def chapters_for_book(chapters: Iterable[dict], book_id: str) -> list[dict]:
    own = [chapter for chapter in chapters if str(chapter.get("book_id")) == str(book_id)]
    return sorted(own, key=lambda chapter: int(chapter.get("chapter_number") or 0))


def comments_for_book(comments: Iterable[dict], book_id: str) -> list[dict]:
    own = [comment for comment in comments if str(comment.get("book_id")) == str(book_id)]
    return sorted(own, key=lambda comment: comment.get("created_at") or "", reverse=True)


def purchased_book_ids(purchases: Iterable[dict], user_id: str) -> set[str]:
    return {str(p["book_id"]) for p in purchases if str(p.get("user_id")) == str(user_id) and p.get("book_id")}


def progress_by_book(records: Iterable[dict], user_id: str) -> dict[str, dict]:
    """Latest progress record per book for one reader."""
    latest: dict[str, dict] = {}
    for record in records:
        if str(record.get("user_id")) != str(user_id) or not record.get("book_id"):
            continue
        book_id = str(record["book_id"])
        seen = latest.get(book_id)
        if seen is None or (record.get("last_read") or "") >= (seen.get("last_read") or ""):
            latest[book_id] = record
    return latest


def find_user_by_email(users: Iterable[dict], email: str) -> dict | None:
    wanted = email.strip().lower()
    for user in users:
        if str(user.get("email", "")).strip().lower() == wanted:
            return user
    return None


def to_data_uri(filename: str, content: bytes, mime: str | None = None) -> str:
    mime = mime or mimetypes.guess_type(filename)[0] or "application/octet-stream"
    return f"data:{mime};base64,{base64.b64encode(content).decode('ascii')}"


def downloadable_books(books: Iterable[dict], purchased: Iterable[str]) -> list[dict]:
    """Purchased books that have a PDF attached."""
    owned = {str(book_id) for book_id in purchased}
    return [book for book in books if str(book.get("id")) in owned and book.get("pdf_url")]
