"""
Watchlist API: FastAPI application entry point.

Routers are registered here. Each service lives in app/api/.
"""
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import accounts, auth, media
from app.core.config import settings
from app.core.logging import configure_logging
from app.core.responses import register_exception_handlers
from app.middleware.request_context import RequestContextMiddleware

API_VERSION = "1.0.0"

configure_logging(json_format=settings.log_json, level=settings.LOG_LEVEL)

app = FastAPI(
    title="Watchlist API",
    description="Personal movie and TV-show watchlist tracker.",
    version=API_VERSION,
    docs_url="/docs" if settings.ENABLE_DOCS else None,
    redoc_url="/redoc" if settings.ENABLE_DOCS else None,
)

register_exception_handlers(app)

# ── CORS ──────────────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
# Added last so it wraps CORS and stamps every response with X-Request-ID
app.add_middleware(RequestContextMiddleware)

# ── Routers ───────────────────────────────────────────────────────────────────
app.include_router(auth.router,     prefix="/auth",  tags=["auth"])
app.include_router(media.router,    prefix="/media", tags=["media"])
# Standalone demo registration service
app.include_router(accounts.router, prefix="/api",   tags=["demo-accounts"])


# ── Health check ──────────────────────────────────────────────────────────────
@app.get("/health", tags=["system"])
def health_check() -> dict:
    """Liveness probe. Returns 200 when the server is up."""
    return {
        "status": "ok",
        "version": API_VERSION,
        "env": settings.APP_ENV,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.PORT, log_config=None)
