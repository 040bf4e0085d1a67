import base64
import binascii
import logging
import mimetypes
import os
import re
from myb.core.config import Settings
from myb.core.errors import InvalidPayload, MissingField, NotFound, PayloadTooLarge, UnsupportedType
from myb.core.ids import now_ms

logger = logging.getLogger(__name__)

DATA_URI_RE = re.compile(r"^data:(.+?);base64,(.+)$", re.DOTALL)
ALLOWED_MIME_TYPES = {"image/png", "image/jpeg", "image/jpg", "application/pdf"}
URL_PREFIX = "/uploads/"


def sanitize_filename(filename: str) -> str:
    name = re.sub(r"\s+", "_", filename)
    name = re.sub(r"[^a-zA-Z0-9._-]", "", name)
    return name or "upload"


def parse_data_uri(data: str) -> tuple[str, str]:
    match = DATA_URI_RE.match(data.strip())
    if not match:
        raise InvalidPayload()
    return match.group(1).lower(), match.group(2)


def decode_payload(payload: str) -> bytes:
    try:
        return base64.b64decode("".join(payload.split()), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidPayload() from exc


def save_upload(filename: str | None, data: str | None, settings: Settings) -> str:
    if not filename or not data:
        raise MissingField("filename and data required")
    mime, payload = parse_data_uri(data)
    if mime not in ALLOWED_MIME_TYPES:
        raise UnsupportedType()
    content = decode_payload(payload)
    if len(content) > settings.max_upload_bytes:
        raise PayloadTooLarge()

    os.makedirs(settings.uploads_dir, exist_ok=True)
    safe_name = f"{now_ms()}-{sanitize_filename(filename)}"
    file_path = os.path.join(settings.uploads_dir, safe_name)
    with open(file_path, "wb") as f:
        f.write(content)
    logger.info("Upload stored", extra={"path": file_path, "bytes": len(content), "mime": mime})
    return URL_PREFIX + safe_name


def resolve_upload(name: str, settings: Settings) -> tuple[str, str]:
    if name != os.path.basename(name) or name in ("", ".", ".."):
        raise NotFound()
    file_path = os.path.join(settings.uploads_dir, name)
    if not os.path.isfile(file_path):
        raise NotFound()
    media_type = mimetypes.guess_type(name)[0] or "application/octet-stream"
    return file_path, media_type
