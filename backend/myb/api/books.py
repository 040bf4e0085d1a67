from fastapi import APIRouter, Depends
from myb.api.deps import current_identity, get_tables, wrap_data
from myb.core.errors import Forbidden
from myb.core.ids import now
from myb.schemas.auth import Identity
from myb.schemas.book import BookCreate, BookUpdate
from myb.services.tables import Tables

router = APIRouter(prefix="/tables/books")


def owner_or_admin(identity: Identity):
    def check(book: dict) -> None:
        if not identity.is_admin and identity.username != book.get("owner_id"):
            raise Forbidden()

    return check


@router.get("")
def list_books(tables: Tables = Depends(get_tables)):
    return wrap_data(tables.books.all())


@router.get("/{book_id}")
def get_book(book_id: str, tables: Tables = Depends(get_tables)):
    return tables.books.get(book_id)


@router.post("")
def create_book(
    payload: BookCreate,
    identity: Identity = Depends(current_identity),
    tables: Tables = Depends(get_tables),
):
    defaults = {
        "created_at": now(),
        "owner_id": identity.username,
        "owner_name": identity.username,
    }
    return tables.books.insert(payload.model_dump(), defaults=defaults, prepend=True)


@router.put("/{book_id}")
@router.patch("/{book_id}")
def update_book(
    book_id: str,
    payload: BookUpdate,
    identity: Identity = Depends(current_identity),
    tables: Tables = Depends(get_tables),
):
    changes = payload.model_dump(exclude_unset=True)
    return tables.books.update(book_id, changes, check=owner_or_admin(identity))


@router.delete("/{book_id}")
def delete_book(
    book_id: str,
    identity: Identity = Depends(current_identity),
    tables: Tables = Depends(get_tables),
):
    tables.books.delete(book_id, check=owner_or_admin(identity))
    return {"ok": True}


@router.post("/{book_id}/reads")
def record_read(book_id: str, tables: Tables = Depends(get_tables)):
    return tables.books.increment(book_id, "reads")


@router.post("/{book_id}/likes")
def record_like(book_id: str, tables: Tables = Depends(get_tables)):
    return tables.books.increment(book_id, "likes")
