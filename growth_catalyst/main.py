from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator

import structlog
from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from sqlalchemy import text

from growth_catalyst.core.config import settings
from growth_catalyst.core.database import async_session_factory
from growth_catalyst.core.errors import register_exception_handlers
from growth_catalyst.core.sentry import init_sentry
from growth_catalyst.middleware.security import (
    RequestBodySizeLimitMiddleware,
    SecurityHeadersMiddleware,
)

import growth_catalyst.models  # noqa: F401  (registers all models)

from growth_catalyst.modules.access_grants.router import router as access_grants_router
from growth_catalyst.modules.deal_flow.router import router as deal_flow_router
from growth_catalyst.modules.events.router import router as events_router
from growth_catalyst.modules.investors.router import router as investors_router
from growth_catalyst.modules.invitations.router import router as invitations_router
from growth_catalyst.modules.startups.router import router as startups_router
from growth_catalyst.modules.users.router import router as users_router

# ── Sentry: initialised before the FastAPI app is created ────────────────────
init_sentry(settings.SENTRY_DSN, settings.SENTRY_ENVIRONMENT, settings.APP_VERSION)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None]:
    logger.info("Starting Growth Catalyst API", env=settings.APP_ENV)
    yield
    logger.info("Shutting down Growth Catalyst API")


_is_prod = settings.APP_ENV == "production"

app = FastAPI(
    title="Growth Catalyst API",
    description="Connects startups with investors: profiles, gated access, deal flow and events.",
    version="0.1.0",
    docs_url=None if _is_prod else "/docs",
    redoc_url=None if _is_prod else "/redoc",
    openapi_url=None if _is_prod else "/openapi.json",
    lifespan=lifespan,
)

register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "Accept", "X-Request-ID"],
)
# Added last = outermost = first to see requests
app.add_middleware(
    RequestBodySizeLimitMiddleware,  # type: ignore[arg-type]
    max_bytes=settings.MAX_REQUEST_BODY_BYTES,
)
app.add_middleware(
    SecurityHeadersMiddleware,  # type: ignore[arg-type]
    is_production=_is_prod,
)


# ── X-API-Version response header ────────────────────────────────────────────


@app.middleware("http")
async def add_version_header(request: Request, call_next) -> Response:
    response = await call_next(request)
    response.headers["X-API-Version"] = "v1"
    return response


# ── Health check (root-level, not under /v1) ─────────────────────────────────


@app.get("/health")
async def health_check() -> dict:
    """Ping the database; the service is degraded when it cannot answer."""
    checks: dict[str, dict] = {}

    try:
        async with async_session_factory() as db:
            await db.execute(text("SELECT 1"))
        checks["database"] = {"status": "healthy"}
    except Exception as exc:  # noqa: BLE001
        logger.warning("health_check_database_failed", error=str(exc))
        checks["database"] = {"status": "unhealthy", "error": str(exc)}

    overall = (
        "healthy"
        if all(c["status"] == "healthy" for c in checks.values())
        else "degraded"
    )
    return {"status": overall, "service": "growth-catalyst-api", "checks": checks}


# ── /v1 versioned router ──────────────────────────────────────────────────────

api_v1 = APIRouter(prefix="/v1")

api_v1.include_router(startups_router)
api_v1.include_router(access_grants_router)
api_v1.include_router(investors_router)
api_v1.include_router(deal_flow_router)
api_v1.include_router(events_router)
api_v1.include_router(invitations_router)
api_v1.include_router(users_router)

app.include_router(api_v1)
