import logging
import socket
import time
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from myb.api.router import api_router
from myb.core.config import Settings, settings as default_settings
from myb.core.errors import error_response, register_error_handlers
from myb.core.logging import configure_logging, ensure_request_id, identity_ctx_var, request_id_ctx_var
from myb.services.tables import Tables
from myb.storage import RecordStore, build_store

logger = logging.getLogger(__name__)


def lan_addresses() -> list[str]:
    try:
        _, _, addrs = socket.gethostbyname_ex(socket.gethostname())
    except OSError:
        return []
    return sorted({addr for addr in addrs if not addr.startswith("127.")})


def create_app(settings: Settings | None = None, store: RecordStore | None = None) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        app.state.tables.close()

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.settings = settings
    app.state.tables = Tables(store or build_store(settings))

    app.state.rate_limits = {}

    def over_rate_limit(client_ip: str) -> bool:
        current = time.time()
        rate_limits: dict[str, list[float]] = app.state.rate_limits
        for ip in [ip for ip, stamps in rate_limits.items() if current - stamps[-1] >= 60]:
            del rate_limits[ip]
        history = [t for t in rate_limits.get(client_ip, []) if current - t < 60]
        if len(history) >= settings.rate_limit_per_min:
            return True
        history.append(current)
        rate_limits[client_ip] = history
        return False

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        request_id = ensure_request_id(request.headers.get("X-Request-ID"))
        request_id_ctx_var.set(request_id)
        identity_ctx_var.set("anonymous")

        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > settings.max_request_bytes:
            response = error_response(413, "Payload too large")
        elif settings.environment.lower() == "prod" and over_rate_limit(
            request.client.host if request.client else "unknown"
        ):
            response = error_response(429, "Rate limit exceeded")
        else:
            response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    # outermost; must be added after request_context
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    @app.get("/")
    def root():
        return {"message": f"{settings.app_name} server running"}

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.get("/server-info")
    def server_info():
        return {"addrs": lan_addresses(), "port": settings.api_port}

    app.include_router(api_router)
    logger.info(
        "App configured",
        extra={"storage_backend": settings.storage_backend, "data_dir": settings.data_dir},
    )
    return app


configure_logging(default_settings.log_level)
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=default_settings.api_host, port=default_settings.api_port)
