from __future__ import annotations

import time
from typing import Any

from .config import DEFAULT_RECOMMENDATION_CONFIG

_cache: dict[str, dict[str, Any]] = {}
_hits: int = 0
_misses: int = 0


def make_key(semester: int, department: str) -> str:
    return f"recommendations:{semester}:{department}"


def cache_get(key: str, ttl: float = DEFAULT_RECOMMENDATION_CONFIG.cache_ttl) -> Any | None:
    """Return the cached value if it is younger than ``ttl`` seconds.

    Entries are never updated in place; an expired entry is dropped on read.
    """
    global _hits, _misses
    entry = _cache.get(key)
    if entry and time.time() - entry["created_at"] < ttl:
        _hits += 1
        return entry["value"]
    if entry:
        del _cache[key]
    _misses += 1
    return None


def cache_set(key: str, value: Any) -> None:
    _cache[key] = {"value": value, "created_at": time.time()}


def get_cache_stats() -> dict:
    total = _hits + _misses
    return {
        "size": len(_cache),
        "hits": _hits,
        "misses": _misses,
        "hit_rate": round(_hits / total * 100, 1) if total > 0 else 0.0,
    }


def clear_cache() -> None:
    global _hits, _misses
    _cache.clear()
    _hits = 0
    _misses = 0
