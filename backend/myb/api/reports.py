from fastapi import APIRouter, Depends
from myb.api.deps import get_tables, wrap_data
from myb.core.ids import now
from myb.schemas.report import ReportCreate
from myb.services.tables import Tables

router = APIRouter(prefix="/tables/reports")


@router.get("")
def list_reports(tables: Tables = Depends(get_tables)):
    return wrap_data(tables["reports"].all())


@router.get("/{report_id}")
def get_report(report_id: str, tables: Tables = Depends(get_tables)):
    return tables["reports"].get(report_id)


@router.post("")
def create_report(payload: ReportCreate, tables: Tables = Depends(get_tables)):
    return tables["reports"].insert(payload.to_record(), defaults={"created_at": now()}, prepend=True)
