import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, text

from stationmap import db
from stationmap.config import settings
from stationmap.middleware.rate_limit import limiter

SCHEMA = [
    """
    CREATE TABLE stations (
        Station_ID INTEGER PRIMARY KEY,
        Station_Name TEXT NOT NULL,
        Latitude REAL,
        Longitude REAL,
        Startvorgaenge INTEGER,
        Endvorgaenge INTEGER
    )
    """,
    """
    CREATE TABLE routes (
        Route_ID INTEGER PRIMARY KEY AUTOINCREMENT,
        Start_Station_ID INTEGER NOT NULL,
        Ende_Station TEXT NOT NULL
    )
    """,
]

STATIONS = [
    (1, "Hauptbahnhof", 50.1071, 8.6638, 120, 100),
    (2, "Römer", 50.1106, 8.6821, 80, 95),
    (3, "Zoo", 50.1152, 8.6996, 10, 5),
    (4, "Ostend", 50.1128, 8.7095, None, None),
]

ROUTES = [
    (1, "Römer"),
    (1, "Römer"),
    (1, "Römer"),
    (1, "Zoo"),
    (2, "Hauptbahnhof"),
    (2, "Hauptbahnhof"),
    (3, "Römer"),
]


@pytest.fixture
def db_url(tmp_path, monkeypatch):
    url = f"sqlite:///{tmp_path / 'stations.db'}"
    engine = create_engine(url)
    with engine.begin() as conn:
        for ddl in SCHEMA:
            conn.execute(text(ddl))
        conn.execute(
            text(
                "INSERT INTO stations VALUES (:id, :name, :lat, :lon, :starts, :ends)"
            ),
            [
                {"id": s[0], "name": s[1], "lat": s[2], "lon": s[3], "starts": s[4], "ends": s[5]}
                for s in STATIONS
            ],
        )
        conn.execute(
            text("INSERT INTO routes (Start_Station_ID, Ende_Station) VALUES (:s, :e)"),
            [{"s": s, "e": e} for s, e in ROUTES],
        )
    engine.dispose()

    monkeypatch.setattr(settings, "DATABASE_URL", url)
    yield url
    db.dispose_engines()


@pytest.fixture
def broken_db(tmp_path, monkeypatch):
    # sqlite cannot create a file inside a missing directory
    url = f"sqlite:///{tmp_path / 'missing' / 'nope.db'}"
    monkeypatch.setattr(settings, "DATABASE_URL", url)
    yield url
    db.dispose_engines()


@pytest.fixture
def cache_path(tmp_path, monkeypatch):
    path = tmp_path / "cache" / "stations.json"
    monkeypatch.setattr(settings, "CACHE_PATH", str(path))
    monkeypatch.setattr(settings, "CACHE_TTL_SEC", 3600)
    monkeypatch.setattr(settings, "USE_CACHE", True)
    monkeypatch.setattr(settings, "REDIS_URL", None)
    return path


@pytest.fixture
def client(db_url, cache_path, monkeypatch):
    from stationmap.main import create_app

    monkeypatch.setattr(settings, "ADMIN_API_KEY", "test-key")
    monkeypatch.setattr(settings, "PUBLIC_RATE_LIMIT", "1000/minute")
    monkeypatch.setattr(settings, "ADMIN_RATE_LIMIT", "1000/minute")
    limiter.reset()
    with TestClient(create_app()) as c:
        yield c


@pytest.fixture
def add_route(db_url):
    """Record one more trip after the app has already cached its stations."""
    def _add(start_station_id: int, end_station: str) -> None:
        engine = create_engine(db_url)
        with engine.begin() as conn:
            conn.execute(
                text("INSERT INTO routes (Start_Station_ID, Ende_Station) VALUES (:s, :e)"),
                {"s": start_station_id, "e": end_station},
            )
        engine.dispose()

    return _add


@pytest.fixture
def add_station(db_url):
    """Insert a station row as-is, including NULL or non-numeric coordinates."""
    def _add(station_id: int, name: str, lat, lon) -> None:
        engine = create_engine(db_url)
        with engine.begin() as conn:
            conn.execute(
                text("INSERT INTO stations VALUES (:id, :name, :lat, :lon, 1, 1)"),
                {"id": station_id, "name": name, "lat": lat, "lon": lon},
            )
        engine.dispose()

    return _add
