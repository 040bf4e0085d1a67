from fastapi import Depends, Header, Request
from myb.core.config import Settings
from myb.core.errors import Forbidden, InvalidReference
from myb.core.logging import bind_identity
from myb.core.security import resolve_identity
from myb.schemas.auth import Identity
from myb.services.tables import Tables


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_tables(request: Request) -> Tables:
    return request.app.state.tables


async def current_identity(
    authorization: str | None = Header(None),
    settings: Settings = Depends(get_settings),
) -> Identity:
    identity = resolve_identity(authorization, settings)
    bind_identity(identity.username)
    return identity


def require_admin(identity: Identity = Depends(current_identity)) -> Identity:
    if not identity.is_admin:
        raise Forbidden()
    return identity


async def upload_identity(
    authorization: str | None = Header(None),
    settings: Settings = Depends(get_settings),
) -> Identity | None:
    if not settings.upload_requires_admin:
        return None
    return require_admin(await current_identity(authorization, settings))


def ensure_book_exists(book_id: str, tables: Tables, settings: Settings) -> None:
    if settings.enforce_references and not tables.books.exists(book_id):
        raise InvalidReference(f"Unknown book_id: {book_id}")


def wrap_data(rows: list[dict]) -> dict:
    return {"data": rows}
