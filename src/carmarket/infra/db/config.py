from __future__ import annotations

import os
from dataclasses import dataclass


def database_url() -> str:
    url = os.getenv("DATABASE_URL")

    if not url:
        raise RuntimeError("DATABASE_URL environment variable is not set")

    return url


@dataclass(frozen=True, slots=True)
class PoolSettings:
    pool_size: int
    max_overflow: int
    pool_recycle_seconds: int


def pool_settings() -> PoolSettings:
    """Connection pool sizing, overridable per deployment."""
    return PoolSettings(
        pool_size=int(os.getenv("DB_POOL_SIZE", "10")),
        max_overflow=int(os.getenv("DB_MAX_OVERFLOW", "20")),
        pool_recycle_seconds=int(os.getenv("DB_POOL_RECYCLE_SECONDS", "3600")),
    )
