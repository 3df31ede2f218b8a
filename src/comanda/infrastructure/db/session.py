from __future__ import annotations

import logging
import os
from functools import lru_cache

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

# Engines handed out by _build_engine, so shutdown can close their pools.
_built_engines: list[Engine] = []


def _database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is not set")
    return url


def _pool_size() -> int:
    return int(os.getenv("DATABASE_POOL_SIZE", "5"))


@lru_cache(maxsize=8)
def _build_engine(database_url: str, connect_timeout: int, pool_size: int) -> Engine:
    engine = create_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=pool_size,
        connect_args={"connect_timeout": connect_timeout},
    )
    _built_engines.append(engine)
    return engine


def get_engine(timeout_seconds: float = 1.0) -> Engine:
    connect_timeout = max(1, int(timeout_seconds))
    return _build_engine(_database_url(), connect_timeout, _pool_size())


def dispose_engines() -> None:
    if _build_engine.cache_info().currsize == 0:
        return
    _build_engine.cache_clear()
    while _built_engines:
        _built_engines.pop().dispose()


def ping_database(timeout_seconds: float = 1.0) -> bool:
    try:
        with get_engine(timeout_seconds).connect() as connection:
            connection.execute(text("SELECT 1"))
        return True
    except Exception:
        logger.warning("database_ping_failed", exc_info=True)
        return False
