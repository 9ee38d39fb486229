"""Application entry point for the Heatmap Center API service."""

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from app.api.routes.auth import router as auth_router
from app.api.routes.geo import router as geo_router
from app.api.routes.locations import router as locations_router
from app.api.routes.maps import router as maps_router
from app.api.routes.pages import router as pages_router
from app.core.config import Settings, settings as default_settings
from app.core.context import AppContext
from app.core.deps import get_context
from app.core.errors import init_error_handlers
from app.core.logging import setup_logging
from app.core.middleware import RequestContextLogMiddleware
from app.core.rate_limit import init_rate_limiter


def _cors_origins(settings: Settings) -> list[str]:
    if settings.ENV == "prod":
        if not settings.CORS_ALLOWED_ORIGINS:
            raise RuntimeError("CORS_ALLOWED_ORIGINS must be configured for prod")
        return settings.CORS_ALLOWED_ORIGINS
    return settings.CORS_ALLOWED_ORIGINS or ["http://localhost:3000"]


def create_app(context: AppContext | None = None) -> FastAPI:
    """Build the app around ``context``; a default one is created from settings."""

    context = context or AppContext(default_settings)
    settings = context.settings

    app = FastAPI(title=settings.APP_NAME, debug=settings.DEBUG)
    app.state.context = context

    init_rate_limiter(app)
    init_error_handlers(app, settings)

    app.add_middleware(RequestContextLogMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(settings),
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "X-Request-ID"],
    )
    # Nation and sub-region payloads compress well
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    @app.on_event("startup")
    async def startup_event():
        """Open the warehouse, load users and start the refresh schedule."""
        await context.init()

    @app.on_event("shutdown")
    async def shutdown_event():
        await context.shutdown()

    @app.get("/api/healthz", tags=["system"], summary="Liveness probe")
    def healthz() -> dict[str, str]:
        """Simple liveness probe that load balancers and monitors can call."""

        return {"status": "ok"}

    @app.get("/api/readyz", tags=["system"], summary="Readiness probe")
    async def readyz(ctx: AppContext = Depends(get_context)):
        if not ctx.ready:
            raise HTTPException(status_code=503, detail="Service not ready")
        if not ctx.cache.cache_dir.is_dir():
            raise HTTPException(status_code=503, detail="Cache directory missing")
        version = await ctx.gateway.ping()
        return {
            "ready": True,
            "warehouse": "connected" if version else "unavailable",
            "warehouse_version": version,
        }

    app.include_router(auth_router, prefix="/api")
    app.include_router(geo_router, prefix="/api")
    app.include_router(locations_router, prefix="/api")
    app.include_router(maps_router, prefix="/api")
    app.include_router(pages_router)
    return app


setup_logging()

app = create_app()
