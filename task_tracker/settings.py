from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple
import logging
import os

logger = logging.getLogger(__name__)

DEFAULT_DEV_ORIGINS: Tuple[str, ...] = (
    "http://localhost",
    "http://127.0.0.1",
    "http://localhost:3000",
    "http://localhost:8080",
)


@dataclass(frozen=True)
class Settings:
    environment: str
    database_url: Optional[str]
    db_pool_min_size: int
    db_pool_max_size: int
    log_level: str
    allowed_origins: Tuple[str, ...]
    port: int
    workers: int


def _int_from_env(name: str, default: int, *, minimum: int = 0) -> int:
    raw_value = os.getenv(name)
    if raw_value is None or not raw_value.strip():
        return default
    try:
        value = int(raw_value)
    except ValueError:
        logger.warning("Invalid %s value '%s'; defaulting to %s", name, raw_value, default)
        return default
    return max(minimum, value)


def parse_allowed_origins(raw_value: Optional[str], *, is_production: bool) -> Tuple[str, ...]:
    parsed = [origin.strip() for origin in (raw_value or "").split(",") if origin.strip()]
    if "*" in parsed:
        logger.warning(
            "ALLOWED_ORIGINS contains '*', but allow_credentials is enabled; ignoring wildcard entry."
        )
    origins = tuple(origin for origin in parsed if origin != "*")
    if not origins and not is_production:
        return DEFAULT_DEV_ORIGINS
    return origins


@lru_cache
def get_settings() -> Settings:
    environment = os.getenv("ENVIRONMENT", "").lower()
    is_production = environment == "production"
    database_url = os.getenv("DATABASE_URL") or None
    min_size = _int_from_env("DB_POOL_MIN_SIZE", 1, minimum=1)
    max_size = max(min_size, _int_from_env("DB_POOL_MAX_SIZE", 5, minimum=1))

    return Settings(
        environment=environment,
        database_url=database_url,
        db_pool_min_size=min_size,
        db_pool_max_size=max_size,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        allowed_origins=parse_allowed_origins(
            os.getenv("ALLOWED_ORIGINS"), is_production=is_production
        ),
        port=_int_from_env("PORT", 8080, minimum=1),
        workers=_int_from_env("WEB_CONCURRENCY", 1, minimum=1),
    )
