from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_ENV: str = "development"
    ALLOWED_ORIGINS: str = "http://127.0.0.1:8000,http://localhost:8000"
    ADMIN_API_KEY: str = "change-me"
    LOG_LEVEL: str = "INFO"

    # database (read-only: stations + routes)
    DATABASE_URL: str = f"sqlite:///{BASE_DIR / 'data' / 'stations.db'}"

    # cache
    USE_CACHE: bool = True
    CACHE_PATH: str = str(BASE_DIR / "cache" / "stations.json")
    CACHE_TTL_SEC: int = 3600
    REDIS_URL: str | None = None
    REDIS_KEY: str = "public:stations_cache"

    # aggregation
    MOST_POPULAR_PLACEHOLDER: str = "N/A"
    # legacy exports stored longitude in Latitude and vice versa
    SWAP_COORDINATES: bool = False

    # map page
    STATIC_DIR: str = str(BASE_DIR / "static")
    MAP_TITLE: str = "Interaktive Karte von Frankfurt"
    MAP_CENTER_LAT: float = 50.1109
    MAP_CENTER_LON: float = 8.6821
    MAP_ZOOM: int = 13

    # worker
    WORKER_INTERVAL_SEC: int = 900

    # rate limit
    PUBLIC_RATE_LIMIT: str = "60/minute"
    ADMIN_RATE_LIMIT: str = "20/minute"


settings = Settings()
