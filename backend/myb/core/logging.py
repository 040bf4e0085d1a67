import logging
import sys
import uuid
from contextvars import ContextVar
from pythonjsonlogger import jsonlogger

request_id_ctx_var: ContextVar[str] = ContextVar("request_id", default="-")
identity_ctx_var: ContextVar[str] = ContextVar("identity", default="anonymous")

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s %(request_id)s %(identity)s"


class RequestContextFilter(logging.Filter):
    """Stamps every record with the current request id and the resolved identity."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_ctx_var.get()
        record.identity = identity_ctx_var.get()
        return True


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    root.setLevel(level)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(jsonlogger.JsonFormatter(_LOG_FORMAT))
    handler.addFilter(RequestContextFilter())
    root.handlers = [handler]
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers = []
        uvicorn_logger.propagate = True


def ensure_request_id(value: str | None) -> str:
    return value or str(uuid.uuid4())


def bind_identity(username: str) -> None:
    identity_ctx_var.set(username)
