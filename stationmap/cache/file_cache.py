from __future__ import annotations

import logging
import os
import tempfile
import time
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

import redis
from pydantic import TypeAdapter, ValidationError

from stationmap.cache.redis_cache import RedisCache
from stationmap.config import settings
from stationmap.domain.models import StationOut

logger = logging.getLogger(__name__)

_STATIONS = TypeAdapter(List[StationOut])


class StationCache:
    """
    JSON file holding the aggregated station list.
    Freshness is the file's mtime; nothing is locked, so two concurrent
    misses simply both recompute and the last rename wins.
    """

    def __init__(self, path: Path, ttl_sec: int, mirror: Optional[RedisCache] = None):
        self.path = Path(path)
        self.ttl_sec = ttl_sec
        self.mirror = mirror

    def age(self) -> Optional[float]:
        try:
            mtime = self.path.stat().st_mtime
        except FileNotFoundError:
            return None
        return max(0.0, time.time() - mtime)

    def is_fresh(self) -> bool:
        age = self.age()
        return age is not None and age < self.ttl_sec

    def read(self) -> Optional[List[StationOut]]:
        """Cached stations if present and younger than ttl, else None."""
        mirrored = self._read_mirror()
        if mirrored is not None:
            return mirrored

        if not self.is_fresh():
            return None
        stations = self._load()
        if stations is not None:
            logger.info("using cached data (%s)", self.path)
        return stations

    def read_stale(self) -> Optional[List[StationOut]]:
        """Whatever the file holds, regardless of age."""
        if not self.path.exists():
            return None
        return self._load()

    def write(self, stations: List[StationOut]) -> None:
        payload = _STATIONS.dump_json(stations, indent=4)

        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=str(self.path.parent), prefix=".stations-", suffix=".json")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(payload)
            os.replace(tmp, self.path)
        except OSError:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise
        logger.info("cache updated (%d stations -> %s)", len(stations), self.path)

        self._write_mirror(payload.decode("utf-8"))

    def invalidate(self) -> bool:
        removed = False
        try:
            self.path.unlink()
            removed = True
        except FileNotFoundError:
            pass
        if self.mirror is not None and self.mirror.is_enabled():
            try:
                self.mirror.delete(settings.REDIS_KEY)
            except redis.RedisError:
                logger.warning("redis delete failed", exc_info=True)
        if removed:
            logger.info("cache invalidated (%s)", self.path)
        return removed

    def _load(self) -> Optional[List[StationOut]]:
        try:
            return _STATIONS.validate_json(self.path.read_bytes())
        except FileNotFoundError:
            return None
        except (OSError, ValidationError):
            logger.warning("ignoring unreadable cache file %s", self.path, exc_info=True)
            return None

    def _read_mirror(self) -> Optional[List[StationOut]]:
        if self.mirror is None or not self.mirror.is_enabled():
            return None
        try:
            raw = self.mirror.get_json(settings.REDIS_KEY)
        except redis.RedisError:
            logger.warning("redis read failed; falling back to file", exc_info=True)
            return None
        if not raw:
            return None
        try:
            return _STATIONS.validate_json(raw)
        except ValidationError:
            logger.warning("ignoring unreadable redis payload", exc_info=True)
            return None

    def _write_mirror(self, payload: str) -> None:
        if self.mirror is None or not self.mirror.is_enabled():
            return
        try:
            self.mirror.set_json(settings.REDIS_KEY, payload, ttl_sec=self.ttl_sec)
        except redis.RedisError:
            logger.warning("redis write failed; file cache still updated", exc_info=True)


@lru_cache(maxsize=4)
def get_mirror(url: Optional[str]) -> RedisCache:
    # one client (and connection pool) per REDIS_URL
    return RedisCache(url or "")


def get_cache() -> StationCache:
    return StationCache(
        path=Path(settings.CACHE_PATH),
        ttl_sec=settings.CACHE_TTL_SEC,
        mirror=get_mirror(settings.REDIS_URL),
    )
