from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from starlette.middleware.httpsredirect import HTTPSRedirectMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware
from starlette.responses import JSONResponse

from app.core.config import Settings, get_settings
from app.core.logging_config import configure_logging
from app.db.session import DatabaseClient
from routers import content, inshorts, slugs
from services.content_generator import ContentGeneratorService
from services.limits import GenerationLimits
from services.oracle import build_oracle

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "X-XSS-Protection": "0",
    "Permissions-Policy": "geolocation=(), microphone=(), camera=()",
    "Content-Security-Policy": "default-src 'self'",
}


def build_generator(settings: Settings) -> ContentGeneratorService:
    limits = GenerationLimits(
        max_input_chars=settings.max_input_chars,
        max_source_chars=settings.max_source_chars,
    )
    return ContentGeneratorService(build_oracle(settings), limits=limits)


def create_app(
    settings: Settings | None = None,
    generator: ContentGeneratorService | None = None,
    database: DatabaseClient | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)
    database = database or DatabaseClient.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.database.dispose()

    docs_url = "/docs" if settings.enable_docs else None
    redoc_url = "/redoc" if settings.enable_docs else None
    openapi_url = "/openapi.json" if settings.enable_docs else None
    app = FastAPI(
        title=settings.project_name,
        docs_url=docs_url,
        redoc_url=redoc_url,
        openapi_url=openapi_url,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.generator = generator or build_generator(settings)
    app.state.database = database

    if settings.environment == "production":
        app.add_middleware(HTTPSRedirectMiddleware)

    app.add_middleware(
        TrustedHostMiddleware,
        allowed_hosts=settings.allowed_hosts,
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins or ["*"],
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type"],
    )

    limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])
    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(_: Request, exc: RateLimitExceeded) -> JSONResponse:
        return JSONResponse(status_code=429, content={"detail": str(exc)})

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):  # type: ignore[no-untyped-def]
        response = await call_next(request)
        response.headers.update(SECURITY_HEADERS)
        return response

    @app.get("/health")
    async def health() -> dict[str, object]:
        return {
            "status": "ok",
            "ai_degraded": app.state.generator.degraded,
            "database_connected": app.state.database.connected,
        }

    app.include_router(content.router, prefix=settings.api_v1_prefix)
    app.include_router(inshorts.router, prefix=settings.api_v1_prefix)
    app.include_router(slugs.router, prefix=settings.api_v1_prefix)
    return app
