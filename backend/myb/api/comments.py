from fastapi import APIRouter, Depends
from myb.api.deps import ensure_book_exists, get_settings, get_tables, require_admin, wrap_data
from myb.core.config import Settings
from myb.core.ids import now
from myb.schemas.auth import Identity
from myb.schemas.comment import CommentCreate
from myb.services.tables import Tables

router = APIRouter(prefix="/tables/comments")


@router.get("")
def list_comments(tables: Tables = Depends(get_tables)):
    return wrap_data(tables["comments"].all())


@router.get("/{comment_id}")
def get_comment(comment_id: str, tables: Tables = Depends(get_tables)):
    return tables["comments"].get(comment_id)


@router.post("")
def create_comment(
    payload: CommentCreate,
    identity: Identity = Depends(require_admin),
    tables: Tables = Depends(get_tables),
    settings: Settings = Depends(get_settings),
):
    ensure_book_exists(payload.book_id, tables, settings)
    defaults = {
        "created_at": now(),
        "user_id": identity.username,
        "user_name": identity.username,
    }
    return tables["comments"].insert(payload.model_dump(), defaults=defaults)
