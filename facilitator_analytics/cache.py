import copy
import hashlib
import inspect
import json
import os
import threading
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, List, Optional, Sequence

from cachetools import TTLCache
from loguru import logger
from pydantic import BaseModel

from facilitator_analytics import get_metrics_registry

DEFAULT_TTL_SECONDS = int(os.getenv('CACHE_TTL_SECONDS', '300'))
DEFAULT_MAX_ENTRIES = int(os.getenv('CACHE_MAX_ENTRIES', '1024'))

_registered_queries: List["CachedQuery"] = []
_registry_lock = threading.Lock()


def _json_default(value: Any):
    if isinstance(value, BaseModel):
        return value.model_dump(mode='json')
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    if isinstance(value, Decimal):
        return str(value)
    raise TypeError(f"Cannot build cache key from {type(value).__name__}")


def create_standard_cache_key(*args: Any, **kwargs: Any) -> str:
    """Stable hash of a query input: same content, same key, regardless of dict order."""
    if kwargs or len(args) > 1:
        value = {'args': list(args), 'kwargs': kwargs}
    else:
        value = args[0] if args else None
    payload = json.dumps(value, sort_keys=True, default=_json_default, separators=(',', ':'))
    return hashlib.sha256(payload.encode('utf-8')).hexdigest()


class CachedQuery:
    """
    Callable wrapper memoizing `query_fn` in a TTL cache.

    Keys are `<prefix>:<create_cache_key(...)>` over the call's bound
    arguments, defaults applied. Exceptions raised by `query_fn` propagate
    and nothing is stored for that key.
    """

    def __init__(
        self,
        query_fn: Callable,
        cache_key_prefix: str,
        create_cache_key: Callable[..., str],
        tags: Sequence[str] = (),
        ttl: Optional[int] = None,
        maxsize: Optional[int] = None,
    ):
        self.query_fn = query_fn
        self.cache_key_prefix = cache_key_prefix
        self.create_cache_key = create_cache_key
        self.tags = tuple(tags)
        self._cache = TTLCache(maxsize=maxsize or DEFAULT_MAX_ENTRIES, ttl=ttl or DEFAULT_TTL_SECONDS)
        self._lock = threading.Lock()
        self._signature = inspect.signature(query_fn)
        self.__wrapped__ = query_fn
        self.__doc__ = query_fn.__doc__
        self.__name__ = getattr(query_fn, '__name__', cache_key_prefix)

    def cache_key(self, *args, **kwargs) -> str:
        # Positional and keyword spellings of a call share one key.
        bound = self._signature.bind(*args, **kwargs)
        bound.apply_defaults()
        return f"{self.cache_key_prefix}:{self.create_cache_key(*bound.args, **bound.kwargs)}"

    def __call__(self, *args, **kwargs):
        key = self.cache_key(*args, **kwargs)
        metrics = get_metrics_registry()

        with self._lock:
            if key in self._cache:
                metrics.record_cache(self.cache_key_prefix, hit=True)
                return copy.deepcopy(self._cache[key])

        metrics.record_cache(self.cache_key_prefix, hit=False)
        result = self.query_fn(*args, **kwargs)

        with self._lock:
            self._cache[key] = result
        return copy.deepcopy(result)

    def invalidate(self):
        with self._lock:
            self._cache.clear()

    def __len__(self):
        with self._lock:
            return len(self._cache)


def create_cached_query(
    query_fn: Callable,
    cache_key_prefix: str,
    create_cache_key: Callable[..., str] = create_standard_cache_key,
    tags: Sequence[str] = (),
    ttl: Optional[int] = None,
) -> CachedQuery:
    cached = CachedQuery(query_fn, cache_key_prefix, create_cache_key, tags=tags, ttl=ttl)
    with _registry_lock:
        _registered_queries.append(cached)
    return cached


def _paginated_cache_key(query_input: Any = None, pagination: Any = None) -> str:
    if isinstance(pagination, BaseModel):
        pagination = pagination.model_dump()
    pagination = pagination or {}
    return create_standard_cache_key({
        'input': query_input,
        'limit': pagination.get('limit'),
        'cursor': pagination.get('cursor'),
    })


def create_cached_paginated_query(
    query_fn: Callable,
    cache_key_prefix: str,
    tags: Sequence[str] = (),
    ttl: Optional[int] = None,
) -> CachedQuery:
    """Cache a `query_fn(input, pagination)`; the key covers the input and the page window."""
    return create_cached_query(query_fn, cache_key_prefix, _paginated_cache_key, tags=tags, ttl=ttl)


def revalidate_tag(tag: str) -> int:
    """Drop every cached entry of queries carrying `tag`. Returns the number of queries cleared."""
    with _registry_lock:
        queries = [q for q in _registered_queries if tag in q.tags]

    for query in queries:
        query.invalidate()

    logger.info(f"Revalidated cache tag '{tag}' ({len(queries)} queries)")
    return len(queries)


def clear_cache():
    with _registry_lock:
        queries = list(_registered_queries)

    for query in queries:
        query.invalidate()
