import logging
from typing import List

from fastapi import APIRouter, HTTPException, Request

from stationmap.config import settings
from stationmap.domain.models import MapConfigOut, StationOut
from stationmap.middleware.rate_limit import limiter
from stationmap.worker.tasks import get_stations_payload

router = APIRouter(prefix="/api/public", tags=["public"])
logger = logging.getLogger(__name__)


@router.get("/stations", response_model=List[StationOut])
@limiter.limit(lambda: settings.PUBLIC_RATE_LIMIT)
def stations(request: Request):
    """
    Every station with its route statistics.
    Served from the cache file while it is fresh; recomputed on miss.
    """
    return get_stations_payload()


@router.get("/stations/{station_id}", response_model=StationOut)
@limiter.limit(lambda: settings.PUBLIC_RATE_LIMIT)
def station_detail(request: Request, station_id: int):
    for s in get_stations_payload():
        if s.station_id == station_id:
            return s
    raise HTTPException(status_code=404, detail="Station not found")


@router.get("/map-config", response_model=MapConfigOut)
@limiter.limit(lambda: settings.PUBLIC_RATE_LIMIT)
def map_config(request: Request):
    return MapConfigOut(
        title=settings.MAP_TITLE,
        center_lat=settings.MAP_CENTER_LAT,
        center_lon=settings.MAP_CENTER_LON,
        zoom=settings.MAP_ZOOM,
    )
