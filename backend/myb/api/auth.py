import logging
from fastapi import APIRouter, Depends
from myb.api.deps import current_identity, get_settings
from myb.core.config import Settings
from myb.core.errors import InvalidLogin, MissingField
from myb.core.security import ADMIN_ROLE, check_admin_credentials, issue_token
from myb.schemas.auth import Identity, LoginOut, LoginRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth")


@router.post("/login", response_model=LoginOut)
def login(payload: LoginRequest, settings: Settings = Depends(get_settings)):
    if not payload.username or not payload.password:
        raise MissingField("username and password required")
    if not check_admin_credentials(payload.username, payload.password, settings):
        logger.info("Admin login failed", extra={"username": payload.username})
        raise InvalidLogin()
    token = issue_token(payload.username, ADMIN_ROLE, settings)
    logger.info("Admin login succeeded", extra={"username": payload.username})
    return LoginOut(token=token, username=payload.username, role=ADMIN_ROLE)


@router.get("/me", response_model=Identity)
def me(identity: Identity = Depends(current_identity)):
    return identity
