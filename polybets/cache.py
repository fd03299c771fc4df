import hashlib
import json
import logging
import time
from dataclasses import dataclass
from typing import Any

from fastapi.encoders import jsonable_encoder

from .integrations.redis_client import redis_conn
from .settings import settings

logger = logging.getLogger(__name__)

KEY_NAMESPACE = "cache"


@dataclass(frozen=True)
class CacheEntry:
    """A stored value with its freshness window, judged at `read_at`."""

    value: Any
    expires_at: float
    stale_until: float
    read_at: float

    @property
    def is_fresh(self) -> bool:
        return self.read_at <= self.expires_at

    @property
    def is_stale(self) -> bool:
        return self.expires_at < self.read_at <= self.stale_until


def cache_key(prefix: str, *parts: str) -> str:
    digest = hashlib.sha256("|".join(parts).encode("utf-8")).hexdigest()
    return f"{KEY_NAMESPACE}:{prefix}:{digest}"


def cache_get(key: str) -> CacheEntry | None:
    if not settings.CACHE_ENABLED:
        return None
    try:
        raw = redis_conn.get(key)
    except Exception:
        logger.exception("cache_read_failed key=%s", key)
        return None
    if not raw:
        return None
    try:
        record = json.loads(raw)
    except ValueError:
        logger.warning("cache_payload_invalid key=%s", key)
        return None
    if not isinstance(record, dict):
        return None
    expires_at = float(record.get("expires_at") or 0)
    return CacheEntry(
        value=record.get("value"),
        expires_at=expires_at,
        stale_until=float(record.get("stale_until") or expires_at),
        read_at=time.time(),
    )


def cache_set(key: str, value: Any, ttl_seconds: int) -> None:
    """Store `value` as fresh for `ttl_seconds`, then stale for CACHE_STALE_GRACE_SECONDS."""
    if not settings.CACHE_ENABLED:
        return
    now_ts = time.time()
    expires_at = now_ts + max(int(ttl_seconds), 1)
    stale_until = expires_at + max(int(settings.CACHE_STALE_GRACE_SECONDS), 0)
    record = {
        "value": jsonable_encoder(value),
        "expires_at": expires_at,
        "stale_until": stale_until,
    }
    try:
        redis_conn.set(key, json.dumps(record), ex=int(stale_until - now_ts))
    except Exception:
        logger.exception("cache_write_failed key=%s", key)
