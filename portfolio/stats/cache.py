"""
Read-through TTL cache for third-party profile stats

``StatsCache.get_stats(provider, username)``:

1. key = "provider:username"
2. a cached entry younger than the TTL is returned without a network call
3. otherwise the provider is fetched and the result stored with the
   current timestamp
4. if the fetch fails, any existing entry is left untouched and
   StatsUnavailable is raised so the caller can offer a retry

Expiry is checked lazily on read; nothing is evicted in the background.
"""
import logging
import threading
import time
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError

from portfolio.shared import config
from portfolio.shared.database import DocumentStore
from portfolio.shared.errors import StatsUnavailable, StoreUnavailable
from portfolio.shared.upsert import atomic_upsert
from portfolio.stats.models import StatsCacheEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    value: Any
    timestamp: float

    def is_fresh(self, now: float, ttl: float) -> bool:
        return now - self.timestamp < ttl


def cache_key(provider: str, username: str) -> str:
    return f"{provider}:{username}"


class MemoryCacheStore:
    """Process-local entry store."""

    def __init__(self):
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[CacheEntry]:
        with self._lock:
            return self._entries.get(key)

    def set(self, key: str, entry: CacheEntry) -> None:
        with self._lock:
            self._entries[key] = entry


class DatabaseCacheStore:
    """
    Entry store backed by the ``stats_cache`` table.

    A store failure never fails a stats request: reads degrade to a miss
    and writes are skipped, both with a warning.
    """

    def __init__(self, store: DocumentStore):
        self.store = store

    def get(self, key: str) -> Optional[CacheEntry]:
        try:
            with self.store.session() as db:
                row = db.query(StatsCacheEntry).filter(StatsCacheEntry.cache_key == key).first()
                if not row:
                    return None
                return CacheEntry(value=row.data, timestamp=row.timestamp)
        except (StoreUnavailable, SQLAlchemyError) as e:
            logger.warning(f"Stats cache read failed for {key}: {e}")
            return None

    def set(self, key: str, entry: CacheEntry) -> None:
        try:
            with self.store.session() as db:
                atomic_upsert(
                    db=db,
                    model=StatsCacheEntry,
                    unique_field="cache_key",
                    unique_value=key,
                    update_data={"data": entry.value, "timestamp": entry.timestamp},
                    timestamp_field="fetched_at",
                )
                db.commit()
        except (StoreUnavailable, SQLAlchemyError) as e:
            logger.warning(f"Stats cache write failed for {key}: {e}")


class StatsCache:
    def __init__(
        self,
        entries,
        fetchers: Dict[str, Callable[[str], Any]],
        ttl: Optional[float] = None,
        clock: Callable[[], float] = time.time,
        single_flight: Optional[bool] = None,
    ):
        self.entries = entries
        self.fetchers = fetchers
        self.ttl = ttl if ttl is not None else config.STATS_CACHE_TTL
        self.clock = clock
        self.single_flight = config.STATS_SINGLE_FLIGHT if single_flight is None else single_flight
        self._inflight: Dict[str, Future] = {}
        self._lock = threading.Lock()

    def get_stats(self, provider: str, username: str) -> Any:
        """
        Return stats for ``username`` on ``provider``, cached or fresh.

        Raises:
            ValueError: unknown provider
            StatsUnavailable: the provider call failed
        """
        fetch = self.fetchers.get(provider)
        if fetch is None:
            raise ValueError(f"Unknown stats provider '{provider}'")

        key = cache_key(provider, username)
        entry = self.entries.get(key)
        if entry is not None and entry.is_fresh(self.clock(), self.ttl):
            logger.debug(f"Stats cache hit for {key}")
            return entry.value

        if not self.single_flight:
            return self._refresh(key, fetch, username)

        with self._lock:
            pending = self._inflight.get(key)
            owner = pending is None
            if owner:
                pending = self._inflight[key] = Future()

        if not owner:
            return pending.result()

        try:
            value = self._refresh(key, fetch, username)
        except BaseException as e:
            pending.set_exception(e)
            raise
        else:
            pending.set_result(value)
            return value
        finally:
            with self._lock:
                self._inflight.pop(key, None)

    def _refresh(self, key: str, fetch: Callable[[str], Any], username: str) -> Any:
        try:
            value = fetch(username)
        except StatsUnavailable:
            logger.warning(f"Stats refresh failed for {key}; cached entry left in place")
            raise
        except Exception as e:
            logger.error(f"Stats refresh failed for {key}: {e}", exc_info=True)
            raise StatsUnavailable(f"Failed to fetch stats for {key}") from e

        self.entries.set(key, CacheEntry(value=value, timestamp=self.clock()))
        logger.info(f"Stats cache refreshed for {key}")
        return value
