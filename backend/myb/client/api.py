import logging
import requests
from myb.client.catalog import progress_by_book, to_data_uri

logger = logging.getLogger(__name__)


class ApiError(Exception):
    def __init__(self, status: int, message: str) -> None:
        super().__init__(f"{status}: {message}")
        self.status = status
        self.message = message


class MybApi:
    """Thin HTTP client for the myb server, used by the Streamlit frontend."""

    def __init__(self, base_url: str, token: str | None = None, session: requests.Session | None = None, timeout: float = 30) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, json=None):
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
        try:
            resp = self.session.request(method, f"{self.base_url}{path}", json=json, headers=headers, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("Request failed", extra={"path": path, "error": str(exc)})
            raise ApiError(0, "Server unreachable") from exc
        if resp.status_code >= 400:
            try:
                message = resp.json().get("error") or resp.reason
            except ValueError:
                message = resp.reason or "Request failed"
            raise ApiError(resp.status_code, message)
        return resp.json()

    def _rows(self, table: str) -> list[dict]:
        return self._request("GET", f"/tables/{table}").get("data", [])

    # auth
    def login(self, username: str, password: str) -> dict:
        data = self._request("POST", "/auth/login", json={"username": username, "password": password})
        self.token = data["token"]
        return data

    def me(self) -> dict:
        return self._request("GET", "/auth/me")

    # books
    def books(self) -> list[dict]:
        return self._rows("books")

    def create_book(self, fields: dict) -> dict:
        return self._request("POST", "/tables/books", json=fields)

    def update_book(self, book_id: str, fields: dict) -> dict:
        return self._request("PUT", f"/tables/books/{book_id}", json=fields)

    def delete_book(self, book_id: str) -> dict:
        return self._request("DELETE", f"/tables/books/{book_id}")

    def record_read(self, book_id: str) -> dict:
        return self._request("POST", f"/tables/books/{book_id}/reads")

    def like(self, book_id: str) -> dict:
        return self._request("POST", f"/tables/books/{book_id}/likes")

    # chapters
    def chapters(self) -> list[dict]:
        return self._rows("chapters")

    def create_chapter(self, fields: dict) -> dict:
        return self._request("POST", "/tables/chapters", json=fields)

    def update_chapter(self, chapter_id: str, fields: dict) -> dict:
        return self._request("PUT", f"/tables/chapters/{chapter_id}", json=fields)

    def delete_chapter(self, chapter_id: str) -> dict:
        return self._request("DELETE", f"/tables/chapters/{chapter_id}")

    # readers
    def users(self) -> list[dict]:
        return self._rows("users")

    def sign_up(self, username: str, email: str, password: str) -> dict:
        return self._request("POST", "/tables/users", json={"username": username, "email": email, "password": password})

    def purchases(self) -> list[dict]:
        return self._rows("purchases")

    def purchase(self, user_id: str, book_id: str, amount: float, payment_method: str = "credit_card") -> dict:
        payload = {"user_id": user_id, "book_id": book_id, "amount": amount, "payment_method": payment_method}
        return self._request("POST", "/tables/purchases", json=payload)

    def progress(self) -> list[dict]:
        return self._rows("reading_progress")

    def save_progress(self, user_id: str, book_id: str, chapter: int, existing: dict | None = None) -> dict:
        """Create-or-patch the single progress record for (user_id, book_id)."""
        if existing is None:
            existing = progress_by_book(self.progress(), user_id).get(str(book_id))
        if existing:
            return self._request("PATCH", f"/tables/reading_progress/{existing['id']}", json={"current_chapter": chapter})
        payload = {"user_id": user_id, "book_id": book_id, "current_chapter": chapter}
        return self._request("POST", "/tables/reading_progress", json=payload)

    def comments(self) -> list[dict]:
        return self._rows("comments")

    def add_comment(self, book_id: str, comment: str) -> dict:
        return self._request("POST", "/tables/comments", json={"book_id": book_id, "comment": comment})

    def report(self, fields: dict) -> dict:
        return self._request("POST", "/tables/reports", json=fields)

    # uploads
    def upload(self, filename: str, content: bytes, mime: str | None = None) -> str:
        data = self._request("POST", "/upload", json={"filename": filename, "data": to_data_uri(filename, content, mime)})
        return data["url"]

    def absolute_url(self, url: str) -> str:
        return url if url.startswith(("http://", "https://", "data:")) else f"{self.base_url}{url}"
