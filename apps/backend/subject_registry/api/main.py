"""
Name: FastAPI Application Entry Point

Responsibilities:
  - Initialize FastAPI application with metadata (title, version)
  - Configure middleware (CORS, request context)
  - Mount subject/center endpoints under /v1 prefix
  - Expose health check endpoint

Collaborators:
  - FastAPI: ASGI web framework
  - CORSMiddleware: Cross-Origin Resource Sharing handler
  - RequestContextMiddleware: Request ID and logging context
  - interfaces.api.http.router: Business endpoints (subjects, audit logs, centers)
  - container: repositories used by the dev seed and /healthz

Constraints:
  - CORS configurable via ALLOWED_ORIGINS env var (comma-separated)
  - DB pool is opened only when Postgres storage is in use

Notes:
  - /v1 prefix allows API versioning
  - /healthz follows Kubernetes health check convention
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from ..application.dev_seed_demo import ensure_dev_demo
from ..container import (
    get_center_repository,
    get_in_memory_store,
    uses_in_memory_storage,
)
from ..crosscutting.config import get_settings
from ..crosscutting.logger import logger
from ..crosscutting.middleware import REQUEST_ID_HEADER, RequestContextMiddleware
from ..infrastructure.db.pool import close_pool, init_pool
from ..interfaces.api.http.router import router
from .exception_handlers import register_exception_handlers


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle. Initializes pool and optional demo seed."""
    settings = get_settings()
    in_memory = uses_in_memory_storage()

    if not in_memory:
        # Must happen before any Postgres repository usage
        init_pool(
            database_url=settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
        )

    try:
        if settings.dev_seed_demo:
            if not in_memory:
                # Postgres: el seed vive en migraciones/scripts, no en startup.
                logger.warning("DEV_SEED_DEMO ignorado: solo aplica a storage in-memory")
            else:
                store = get_in_memory_store()
                ensure_dev_demo(
                    settings,
                    center_repo=store.centers,
                    user_repo=store.users,
                    membership_repo=store.memberships,
                )

        logger.info(
            "Subject Registry API starting up",
            extra={
                "app_env": settings.app_env,
                "storage": "in_memory" if in_memory else "postgres",
                "db_pool_min": settings.db_pool_min_size,
                "db_pool_max": settings.db_pool_max_size,
            },
        )

        yield

    finally:
        close_pool()
        logger.info("Subject Registry API shutting down")


def _get_allowed_origins() -> list[str]:
    return get_settings().get_allowed_origins_list()


app = FastAPI(
    title="Subject Registry API",
    version="0.1.0",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "subjects", "description": "Scoped subject registry (Bearer JWT)"},
        {"name": "audit", "description": "Subject audit history (by id or number)"},
        {"name": "centers", "description": "Centers in the caller's access scope"},
    ],
)

# Middleware order (bottom = first to execute): CORS -> RequestContext
app.add_middleware(RequestContextMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_get_allowed_origins(),
    allow_credentials=False,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", REQUEST_ID_HEADER],
    expose_headers=[REQUEST_ID_HEADER],
)

app.include_router(router, prefix="/v1")

register_exception_handlers(app)


@app.get("/healthz")
def healthz(request: Request):
    """
    Health check that verifies the storage backend.

    Returns:
        ok: True if storage is reachable
        db: "connected", "disconnected" or "in_memory"
        request_id: Correlation ID for this request
    """
    if uses_in_memory_storage():
        db_status = "in_memory"
    else:
        db_status = "disconnected"
        try:
            if get_center_repository().ping():
                db_status = "connected"
        except Exception as e:
            logger.warning("Health check: DB unavailable", extra={"error": str(e)})

    return {
        "ok": db_status != "disconnected",
        "db": db_status,
        "request_id": getattr(request.state, "request_id", None),
    }
