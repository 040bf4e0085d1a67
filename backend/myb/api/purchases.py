from fastapi import APIRouter, Depends
from myb.api.deps import ensure_book_exists, get_settings, get_tables, wrap_data
from myb.core.config import Settings
from myb.core.ids import now
from myb.schemas.purchase import PurchaseCreate
from myb.services.tables import Tables

router = APIRouter(prefix="/tables/purchases")


@router.get("")
def list_purchases(tables: Tables = Depends(get_tables)):
    return wrap_data(tables["purchases"].all())


@router.get("/{purchase_id}")
def get_purchase(purchase_id: str, tables: Tables = Depends(get_tables)):
    return tables["purchases"].get(purchase_id)


@router.post("")
def create_purchase(
    payload: PurchaseCreate,
    tables: Tables = Depends(get_tables),
    settings: Settings = Depends(get_settings),
):
    # payment is simulated by the client; the server only records the sale
    ensure_book_exists(payload.book_id, tables, settings)
    return tables["purchases"].insert(payload.model_dump(), defaults={"purchase_date": now()})
