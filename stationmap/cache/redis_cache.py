from __future__ import annotations
from typing import Optional
import redis
from stationmap.config import settings


class RedisCache:
    """Optional mirror of the station payload; a no-op when REDIS_URL is unset."""

    def __init__(self, url: Optional[str] = None):
        self.client: Optional[redis.Redis] = None
        url = url if url is not None else settings.REDIS_URL
        if url:
            self.client = redis.from_url(url, decode_responses=True)

    def is_enabled(self) -> bool:
        return self.client is not None

    def get_json(self, key: str) -> Optional[str]:
        if not self.client:
            return None
        return self.client.get(key)

    def set_json(self, key: str, value: str, ttl_sec: int) -> None:
        if not self.client:
            return
        self.client.set(key, value, ex=ttl_sec)

    def delete(self, key: str) -> None:
        if not self.client:
            return
        self.client.delete(key)
