import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from fastapi.responses import FileResponse

from stationmap.cache.file_cache import get_cache
from stationmap.config import settings
from stationmap.domain.models import HealthOut
from stationmap.middleware.cors import add_cors
from stationmap.middleware.security_headers import SecurityHeadersMiddleware
from stationmap.middleware.rate_limit import init_rate_limiter, add_rate_limit_exception_handler

from stationmap.api.public import router as public_router
from stationmap.api.admin import router as admin_router


def create_app() -> FastAPI:
    logging.basicConfig(level=settings.LOG_LEVEL)

    app = FastAPI(title="Station Map")

    # CORS (restrict to your domain in production)
    add_cors(app)

    # Security headers
    app.add_middleware(SecurityHeadersMiddleware, app_env=settings.APP_ENV)

    # Rate limiter (slowapi)
    init_rate_limiter(app)
    add_rate_limit_exception_handler(app)

    # Routes
    app.include_router(public_router)
    app.include_router(admin_router)

    # Static (absolute path so it works regardless of cwd)
    static_dir = Path(settings.STATIC_DIR)
    app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")

    @app.get("/", include_in_schema=False)
    def root():
        return FileResponse(str(static_dir / "map.html"))

    @app.get("/health", tags=["health"], response_model=HealthOut)
    def health():
        return HealthOut(ok=True, env=settings.APP_ENV, cache_age_sec=get_cache().age())

    return app
