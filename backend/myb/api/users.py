from fastapi import APIRouter, Depends
from myb.api.deps import get_tables, wrap_data
from myb.core.errors import Conflict
from myb.core.ids import now
from myb.schemas.user import UserCreate
from myb.services.tables import Tables

router = APIRouter(prefix="/tables/users")


def public_user(user: dict) -> dict:
    return {key: value for key, value in user.items() if key != "password"}


@router.get("")
def list_users(tables: Tables = Depends(get_tables)):
    return wrap_data([public_user(user) for user in tables["users"].all()])


@router.get("/{user_id}")
def get_user(user_id: str, tables: Tables = Depends(get_tables)):
    return public_user(tables["users"].get(user_id))


@router.post("")
def sign_up(payload: UserCreate, tables: Tables = Depends(get_tables)):
    email = payload.email.strip().lower()

    def email_unused(users: list[dict]) -> None:
        if any(str(user.get("email", "")).strip().lower() == email for user in users):
            raise Conflict("Email already registered")

    user = tables["users"].insert(payload.model_dump(), defaults={"joined_date": now()}, check=email_unused)
    return public_user(user)
