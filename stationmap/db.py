from __future__ import annotations

import threading
from typing import Dict

from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, Engine

from stationmap.config import settings

# One engine per URL so tests (or a changed DATABASE_URL) get their own pool
_ENGINES: Dict[str, Engine] = {}
_ENGINES_LOCK = threading.Lock()


def get_engine() -> Engine:
    url = settings.DATABASE_URL
    with _ENGINES_LOCK:
        engine = _ENGINES.get(url)
        if engine is None:
            # pool_pre_ping: MySQL drops idle connections between cache refreshes
            engine = create_engine(url, pool_pre_ping=True)
            _ENGINES[url] = engine
    return engine


def connect() -> Connection:
    """Open a read connection on the configured database."""
    return get_engine().connect()


def dispose_engines() -> None:
    with _ENGINES_LOCK:
        for engine in _ENGINES.values():
            engine.dispose()
        _ENGINES.clear()
