from fastapi import APIRouter, Depends
from myb.api.deps import ensure_book_exists, get_settings, get_tables, require_admin, wrap_data
from myb.core.config import Settings
from myb.core.ids import now
from myb.schemas.auth import Identity
from myb.schemas.chapter import ChapterCreate, ChapterUpdate, count_words
from myb.services.tables import Tables

router = APIRouter(prefix="/tables/chapters")


@router.get("")
def list_chapters(tables: Tables = Depends(get_tables)):
    return wrap_data(tables["chapters"].all())


@router.get("/{chapter_id}")
def get_chapter(chapter_id: str, tables: Tables = Depends(get_tables)):
    return tables["chapters"].get(chapter_id)


@router.post("")
def create_chapter(
    payload: ChapterCreate,
    tables: Tables = Depends(get_tables),
    settings: Settings = Depends(get_settings),
):
    ensure_book_exists(payload.book_id, tables, settings)
    fields = payload.model_dump()
    if fields["word_count"] is None:
        fields["word_count"] = count_words(payload.content)
    return tables["chapters"].insert(fields, defaults={"created_at": now()})


@router.put("/{chapter_id}")
def update_chapter(
    chapter_id: str,
    payload: ChapterUpdate,
    _: Identity = Depends(require_admin),
    tables: Tables = Depends(get_tables),
    settings: Settings = Depends(get_settings),
):
    changes = payload.model_dump(exclude_unset=True)
    if "book_id" in changes:
        ensure_book_exists(changes["book_id"], tables, settings)
    if changes.get("word_count") is None:
        changes.pop("word_count", None)
        if "content" in changes:
            changes["word_count"] = count_words(changes["content"])
    return tables["chapters"].update(chapter_id, changes)


@router.delete("/{chapter_id}")
def delete_chapter(
    chapter_id: str,
    _: Identity = Depends(require_admin),
    tables: Tables = Depends(get_tables),
):
    tables["chapters"].delete(chapter_id)
    return {"ok": True}
