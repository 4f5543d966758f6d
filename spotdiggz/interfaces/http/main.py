from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from spotdiggz.config.settings import Settings, get_settings
from spotdiggz.infrastructure.auth.oidc_jwks import OIDCJWKSClient, TokenVerifier
from spotdiggz.infrastructure.storage.factory import build_storage_service
from spotdiggz.infrastructure.storage.ports import StorageService
from spotdiggz.interfaces.http.routers import spots
from spotdiggz.interfaces.middleware.auth_middleware import AuthMiddleware
from spotdiggz.interfaces.middleware.error_handler import register_error_handlers


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        yield
    finally:
        http = getattr(app.state, "http_client", None)
        if http is not None:
            await http.aclose()


def _configure_logging(level_name: str) -> None:
    level = getattr(logging, level_name.upper(), logging.INFO)
    root = logging.getLogger()
    # Avoid adding duplicate handlers on reload
    if not any(isinstance(h, logging.StreamHandler) for h in root.handlers):
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        )
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(level)
    # Align common libraries
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access", "httpx"):
        logging.getLogger(name).setLevel(level)


def create_app(
    *,
    settings: Settings | None = None,
    jwks_client: TokenVerifier | None = None,
    storage_service: StorageService | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    _configure_logging(settings.log_level)
    app = FastAPI(
        title="spot-diggz API",
        version="0.1.0",
        description="Upload authorization for spot-diggz mobile clients",
        lifespan=lifespan,
    )
    app.state.settings = settings
    # One pooled client for metadata and signBlob calls
    app.state.http_client = httpx.AsyncClient(timeout=settings.http_timeout_seconds)
    app.state.jwks_client = jwks_client or OIDCJWKSClient(
        settings.auth_jwks_url,
        cache_ttl=settings.jwks_cache_ttl,
        timeout=settings.http_timeout_seconds,
    )
    app.state.storage_service = storage_service or build_storage_service(
        settings, app.state.http_client
    )
    register_error_handlers(app)

    api = APIRouter(prefix="/sdz")
    api.include_router(spots.router)

    @api.get("/health", tags=["health"])
    async def health() -> dict[str, str]:
        return {"status": "ok", "message": "spot-diggz api is running"}

    app.include_router(api)

    # Add Auth first, then CORS last so CORS runs outermost and can handle preflight OPTIONS
    app.add_middleware(AuthMiddleware, settings=settings)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins_list,
        allow_methods=["GET", "POST", "PATCH", "DELETE"],
        allow_headers=["*"],
    )
    return app


app = create_app()
