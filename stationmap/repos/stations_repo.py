from __future__ import annotations

import datetime
import logging
from typing import Any, List, Optional, Tuple

from sqlalchemy import text
from sqlalchemy.engine import Connection

from stationmap import db
from stationmap.config import settings
from stationmap.domain.models import StationOut

logger = logging.getLogger(__name__)


# ===== SQL (schema owned by the bike-share database, read-only here) =====
SQL_STATIONS = text(
    "SELECT Station_ID, Station_Name, Latitude, Longitude, Startvorgaenge, Endvorgaenge "
    "FROM stations"
)

# Ties on count come back in whatever order the database sorts them
SQL_MOST_POPULAR = text(
    "SELECT Ende_Station, COUNT(*) AS cnt "
    "FROM routes "
    "WHERE Start_Station_ID = :station_id "
    "GROUP BY Ende_Station "
    "ORDER BY cnt DESC "
    "LIMIT 1"
)

SQL_END_NODES = text(
    "SELECT DISTINCT Ende_Station "
    "FROM routes "
    "WHERE Start_Station_ID = :station_id "
    "ORDER BY Ende_Station"
)


def _to_int(value: Any) -> int:
    # Startvorgaenge/Endvorgaenge may be NULL or stored as text
    if value is None or value == "":
        return 0
    return int(float(value))


def _to_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


def route_stats(conn: Connection, station_id: int) -> Tuple[str, List[str]]:
    """
    Returns (most_popular_destination, distinct_destinations) for routes
    starting at station_id. No routes -> (placeholder, []).
    """
    row = conn.execute(SQL_MOST_POPULAR, {"station_id": station_id}).first()
    most_popular = row[0] if row is not None and row[0] is not None else settings.MOST_POPULAR_PLACEHOLDER

    end_nodes = [
        r[0]
        for r in conn.execute(SQL_END_NODES, {"station_id": station_id})
        if r[0] is not None
    ]
    return most_popular, end_nodes


def _station_from_row(conn: Connection, row: Any) -> Optional[StationOut]:
    m = row._mapping
    station_id = int(m["Station_ID"])
    lat, lon = _to_float(m["Latitude"]), _to_float(m["Longitude"])
    if lat is None or lon is None:
        logger.warning("skipping station %s: no coordinates", station_id)
        return None
    if settings.SWAP_COORDINATES:
        lat, lon = lon, lat
    most_popular, end_nodes = route_stats(conn, station_id)
    return StationOut(
        station_id=station_id,
        name=str(m["Station_Name"]),
        lat=lat,
        lon=lon,
        start_count=_to_int(m["Startvorgaenge"]),
        end_count=_to_int(m["Endvorgaenge"]),
        most_popular=most_popular,
        end_nodes=end_nodes,
    )


def list_stations(conn: Connection) -> List[StationOut]:
    rows = conn.execute(SQL_STATIONS).fetchall()
    stations = (_station_from_row(conn, row) for row in rows)
    return [s for s in stations if s is not None]


def aggregate_stations() -> List[StationOut]:
    """Full re-aggregation of the database: every station plus its route stats."""
    with db.connect() as conn:
        stations = list_stations(conn)
    logger.info("aggregated %d stations", len(stations))
    return stations


def touch_update() -> str:
    return datetime.datetime.now(datetime.timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")
