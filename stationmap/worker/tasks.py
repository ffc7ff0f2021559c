from __future__ import annotations

import logging
from typing import List

from sqlalchemy.exc import SQLAlchemyError

from stationmap.cache.file_cache import StationCache, get_cache
from stationmap.config import settings
from stationmap.domain.models import RefreshOut, StationOut
from stationmap.repos.stations_repo import aggregate_stations, touch_update

logger = logging.getLogger(__name__)

# database failures plus rows that cannot be coerced (text in a numeric column)
REFRESH_ERRORS = (SQLAlchemyError, TypeError, ValueError)


def recompute_and_cache(cache: StationCache | None = None) -> RefreshOut:
    """
    Re-aggregate every station from the database and rewrite the cache.
    Database/file errors propagate to the caller.
    """
    cache = cache or get_cache()
    updated_at = touch_update()
    stations = aggregate_stations()
    cache.write(stations)
    return RefreshOut(updated_at=updated_at, stations=len(stations))


def get_stations_payload() -> List[StationOut]:
    """
    Read-through: cached stations when fresh, otherwise recompute and write.
    On database or file failure, serve the stale cache if there is one,
    else an empty list.
    """
    cache = get_cache()

    if settings.USE_CACHE:
        cached = cache.read()
        if cached is not None:
            return cached

    try:
        stations = aggregate_stations()
    except REFRESH_ERRORS:
        logger.exception("station refresh failed; degrading to stale cache")
    else:
        try:
            cache.write(stations)
        except OSError:
            logger.exception("could not write cache %s", cache.path)
        return stations

    stale = cache.read_stale()
    if stale is None:
        logger.warning("no cached stations available; returning empty list")
        return []
    return stale
