from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import Any

LOGIN_USER = "LOGIN_USER"
LOGIN_ADMIN = "LOGIN_ADMIN"
LOGOUT = "LOGOUT"
SET_BOOKS = "SET_BOOKS"
SET_PURCHASES = "SET_PURCHASES"
RECORD_PURCHASE = "RECORD_PURCHASE"
SET_PROGRESS = "SET_PROGRESS"
RECORD_PROGRESS = "RECORD_PROGRESS"
ADD_TO_CART = "ADD_TO_CART"
REMOVE_FROM_CART = "REMOVE_FROM_CART"
CLEAR_CART = "CLEAR_CART"
OPEN_BOOK = "OPEN_BOOK"
SET_CHAPTER = "SET_CHAPTER"
TOGGLE_THEME = "TOGGLE_THEME"


@dataclass(frozen=True)
class Action:
    type: str
    payload: Any = None


@dataclass(frozen=True)
class AppState:
    current_user: dict | None = None
    token: str | None = None
    role: str | None = None
    books: tuple[dict, ...] = ()
    purchased_book_ids: frozenset[str] = frozenset()
    reading_progress: dict[str, dict] = field(default_factory=dict)
    cart: tuple[str, ...] = ()
    dark_mode: bool = False
    current_book_id: str | None = None
    current_chapter: int = 1

    @property
    def is_admin(self) -> bool:
        return self.role == "admin" and bool(self.token)

    @property
    def signed_in(self) -> bool:
        return self.current_user is not None or self.is_admin


def reduce(state: AppState, action: Action) -> AppState:
    """Pure transition function; unknown actions leave the state untouched."""
    kind, payload = action.type, action.payload
    if kind == LOGIN_USER:
        return replace(state, current_user=payload, token=None, role="reader")
    if kind == LOGIN_ADMIN:
        user = {"id": payload["username"], "username": payload["username"], "email": payload["username"]}
        return replace(state, current_user=user, token=payload["token"], role=payload.get("role", "admin"))
    if kind == LOGOUT:
        return AppState(books=state.books, dark_mode=state.dark_mode)
    if kind == SET_BOOKS:
        return replace(state, books=tuple(payload))
    if kind == SET_PURCHASES:
        return replace(state, purchased_book_ids=frozenset(payload))
    if kind == RECORD_PURCHASE:
        return replace(
            state,
            purchased_book_ids=state.purchased_book_ids | {payload},
            cart=tuple(book_id for book_id in state.cart if book_id != payload),
        )
    if kind == SET_PROGRESS:
        return replace(state, reading_progress=dict(payload))
    if kind == RECORD_PROGRESS:
        return replace(state, reading_progress={**state.reading_progress, payload["book_id"]: payload})
    if kind == ADD_TO_CART:
        if payload in state.cart or payload in state.purchased_book_ids:
            return state
        return replace(state, cart=state.cart + (payload,))
    if kind == REMOVE_FROM_CART:
        return replace(state, cart=tuple(book_id for book_id in state.cart if book_id != payload))
    if kind == CLEAR_CART:
        return replace(state, cart=())
    if kind == OPEN_BOOK:
        progress = state.reading_progress.get(payload)
        chapter = int(progress.get("current_chapter", 1)) if progress else 1
        return replace(state, current_book_id=payload, current_chapter=chapter)
    if kind == SET_CHAPTER:
        return replace(state, current_chapter=max(1, int(payload)))
    if kind == TOGGLE_THEME:
        return replace(state, dark_mode=not state.dark_mode)
    return state


Listener = Callable[[AppState, Action], None]


class Store:
    def __init__(self, state: AppState | None = None) -> None:
        self._state = state or AppState()
        self._listeners: list[Listener] = []

    @property
    def state(self) -> AppState:
        return self._state

    def dispatch(self, kind: str, payload: Any = None) -> AppState:
        action = Action(kind, payload)
        self._state = reduce(self._state, action)
        for listener in list(self._listeners):
            listener(self._state, action)
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
