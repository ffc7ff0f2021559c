import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.engine import make_url

from stationmap.cache.file_cache import get_cache
from stationmap.config import settings
from stationmap.domain.models import RefreshOut
from stationmap.middleware.rate_limit import limiter
from stationmap.security.api_key import require_admin_api_key
from stationmap.worker.tasks import REFRESH_ERRORS, recompute_and_cache


router = APIRouter(prefix="/api/admin", tags=["admin"])
logger = logging.getLogger(__name__)


@router.get("/config")
@limiter.limit(lambda: settings.ADMIN_RATE_LIMIT)
def admin_config(request: Request, _=Depends(require_admin_api_key)):
    # don't leak secrets
    cache = get_cache()
    return {
        "env": settings.APP_ENV,
        "allowed_origins": settings.ALLOWED_ORIGINS,
        "database": make_url(settings.DATABASE_URL).render_as_string(hide_password=True),
        "cache": {
            "USE_CACHE": settings.USE_CACHE,
            "CACHE_PATH": settings.CACHE_PATH,
            "CACHE_TTL_SEC": settings.CACHE_TTL_SEC,
            "redis": cache.mirror is not None and cache.mirror.is_enabled(),
            "age_sec": cache.age(),
        },
    }


@router.post("/recompute", response_model=RefreshOut)
@limiter.limit(lambda: settings.ADMIN_RATE_LIMIT)
def recompute_now(request: Request, _=Depends(require_admin_api_key)):
    try:
        return recompute_and_cache()
    except REFRESH_ERRORS + (OSError,):
        logger.exception("admin recompute failed")
        raise HTTPException(status_code=503, detail="Recompute failed")


@router.delete("/cache")
@limiter.limit(lambda: settings.ADMIN_RATE_LIMIT)
def invalidate_cache(request: Request, _=Depends(require_admin_api_key)):
    return {"ok": True, "removed": get_cache().invalidate()}
