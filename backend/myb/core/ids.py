import secrets
import string
import time
from datetime import datetime, timezone

_ALPHABET = string.digits + string.ascii_lowercase


def new_id() -> str:
    """Millisecond clock plus a six character base36 suffix, e.g. ``id-1718000000000-k3x9q2``.

    Uniqueness is probabilistic; ids are never checked against stored records.
    """
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(6))
    return f"id-{int(time.time() * 1000)}-{suffix}"


def now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def now_ms() -> int:
    return int(time.time() * 1000)
