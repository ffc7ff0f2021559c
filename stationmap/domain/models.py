from typing import List, Optional

from pydantic import BaseModel, Field


class StationOut(BaseModel):
    station_id: int
    name: str
    lat: float
    lon: float
    start_count: int   # rentals started here
    end_count: int     # rentals ended here

    # computed from routes
    most_popular: str
    end_nodes: List[str] = Field(default_factory=list)


class MapConfigOut(BaseModel):
    title: str
    center_lat: float
    center_lon: float
    zoom: int


class RefreshOut(BaseModel):
    updated_at: str
    stations: int


class HealthOut(BaseModel):
    ok: bool
    env: str
    cache_age_sec: Optional[float] = None
