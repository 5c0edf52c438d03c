from __future__ import annotations

import os
from dataclasses import dataclass


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return float(raw)


def _normalize_redis_url(raw: str) -> str:
    # Accept the bare "host:port" form as well as a full redis URL.
    if "://" in raw:
        return raw
    return f"redis://{raw}"


@dataclass(frozen=True)
class Settings:
    # Document store
    store_backend: str
    redis_url: str
    redis_socket_timeout: float
    redis_connect_timeout: float

    # Listener
    host: str
    port: int

    # Debug
    debug_log_requests: bool
    log_level: str


def get_settings() -> Settings:
    redis_url = _normalize_redis_url(os.getenv("REDIS_URL", "").strip() or "0.0.0.0:6379")

    store_backend = os.getenv("VOTER_STORE", "redis").strip().lower()
    if store_backend not in ("redis", "memory"):
        raise ValueError(f"VOTER_STORE must be 'redis' or 'memory', got {store_backend!r}")

    return Settings(
        store_backend=store_backend,
        redis_url=redis_url,
        redis_socket_timeout=_env_float("REDIS_SOCKET_TIMEOUT", 5.0),
        redis_connect_timeout=_env_float("REDIS_CONNECT_TIMEOUT", 5.0),
        host=os.getenv("VOTER_API_HOST", "0.0.0.0"),
        port=int(os.getenv("VOTER_API_PORT", "1080")),
        debug_log_requests=_env_bool("DEBUG_LOG_REQUESTS", False),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
