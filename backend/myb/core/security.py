import logging
import secrets
from datetime import datetime, timedelta, timezone
import jwt
from myb.core.config import Settings
from myb.core.errors import InvalidCredential, MalformedCredential, Unauthorized
from myb.schemas.auth import Identity

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"


def issue_token(username: str, role: str, settings: Settings, issued_at: datetime | None = None) -> str:
    issued_at = issued_at or datetime.now(timezone.utc)
    payload = {
        "username": username,
        "role": role,
        "iat": issued_at,
        "exp": issued_at + timedelta(hours=settings.token_ttl_hours),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str, settings: Settings) -> Identity:
    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp", "iat"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise InvalidCredential("Token expired") from exc
    except jwt.PyJWTError as exc:
        raise InvalidCredential() from exc
    username = claims.get("username")
    role = claims.get("role")
    if not isinstance(username, str) or not isinstance(role, str):
        raise InvalidCredential()
    return Identity(username=username, role=role)


def bearer_token(authorization: str | None) -> str:
    if not authorization:
        raise Unauthorized()
    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1]:
        raise MalformedCredential()
    return parts[1]


def resolve_identity(authorization: str | None, settings: Settings) -> Identity:
    return decode_token(bearer_token(authorization), settings)


def check_admin_credentials(username: str, password: str, settings: Settings) -> bool:
    # clear-text comparison against configured values
    user_ok = secrets.compare_digest(username.encode(), settings.admin_user.encode())
    pass_ok = secrets.compare_digest(password.encode(), settings.admin_pass.encode())
    return user_ok and pass_ok
