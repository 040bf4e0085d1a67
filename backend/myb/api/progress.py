from fastapi import APIRouter, Depends
from myb.api.deps import ensure_book_exists, get_settings, get_tables, wrap_data
from myb.core.config import Settings
from myb.core.ids import now
from myb.schemas.progress import ProgressCreate, ProgressUpdate
from myb.services.tables import Tables

router = APIRouter(prefix="/tables/reading_progress")


@router.get("")
def list_progress(tables: Tables = Depends(get_tables)):
    return wrap_data(tables["reading_progress"].all())


@router.get("/{progress_id}")
def get_progress(progress_id: str, tables: Tables = Depends(get_tables)):
    return tables["reading_progress"].get(progress_id)


@router.post("")
def create_progress(
    payload: ProgressCreate,
    tables: Tables = Depends(get_tables),
    settings: Settings = Depends(get_settings),
):
    ensure_book_exists(payload.book_id, tables, settings)
    return tables["reading_progress"].insert(payload.model_dump(), defaults={"last_read": now()})


@router.patch("/{progress_id}")
def update_progress(progress_id: str, payload: ProgressUpdate, tables: Tables = Depends(get_tables)):
    changes = payload.model_dump(exclude_unset=True)
    changes["last_read"] = now()
    return tables["reading_progress"].update(progress_id, changes)
