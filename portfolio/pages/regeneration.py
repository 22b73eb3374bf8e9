"""
Incremental static regeneration

Page payloads are built once and served from memory until their
revalidation interval has passed. After that the next request still gets
the stale payload immediately while a single background rebuild runs.

A page that has never been built (an unknown slug under the "blocking"
fallback) is built on the request thread. Concurrent requests for the same
key wait for that one build and share its result.
"""
import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from portfolio.shared.errors import PageBuildError

logger = logging.getLogger(__name__)

HIT = "HIT"
STALE = "STALE"
MISS = "MISS"


@dataclass
class PageResult:
    """
    What a page's ``build_props`` returns.

    ``revalidate`` is the interval in seconds after which the page is
    rebuilt (None caches it until restart). ``not_found`` means there is
    no record behind the page and the request should get a 404.
    """
    props: Optional[Dict[str, Any]] = None
    revalidate: Optional[int] = None
    not_found: bool = False
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class CachedPage:
    result: PageResult
    built_at: float

    def is_fresh(self, now: float) -> bool:
        if self.result.revalidate is None:
            return True
        return now - self.built_at < self.result.revalidate


class RegenerationCache:
    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        self.clock = clock
        self.executor = executor or ThreadPoolExecutor(max_workers=2, thread_name_prefix="regenerate")
        self._pages: Dict[str, CachedPage] = {}
        self._inflight: Dict[str, Future] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[CachedPage]:
        with self._lock:
            return self._pages.get(key)

    def render(self, key: str, build: Callable[[], PageResult]) -> tuple[PageResult, str]:
        """
        Return ``(result, cache_state)`` for ``key``.

        cache_state is HIT (fresh), STALE (served while a rebuild runs in the
        background) or MISS (built on this request or a concurrent one).

        Raises:
            PageBuildError: the page had never been built and building it failed
        """
        with self._lock:
            page = self._pages.get(key)
            if page is not None and page.is_fresh(self.clock()):
                return page.result, HIT
            pending = self._inflight.get(key)
            owner = pending is None
            if owner:
                pending = self._inflight[key] = Future()

        if page is not None:
            if owner:
                logger.info(f"Regenerating stale page {key}")
                self.executor.submit(self._regenerate, key, build, pending)
            return page.result, STALE

        if not owner:
            return pending.result(), MISS
        return self._generate(key, build, pending), MISS

    def prerender(self, key: str, build: Callable[[], PageResult]) -> PageResult:
        """Build ``key`` ahead of the first request."""
        result = self._build(key, build)
        with self._lock:
            self._store(key, result)
        return result

    def wait_for_background(self, timeout: Optional[float] = None) -> None:
        """Block until in-flight builds finish."""
        with self._lock:
            pending = list(self._inflight.values())
        wait(pending, timeout=timeout)

    def shutdown(self) -> None:
        self.executor.shutdown(wait=True)

    def _build(self, key: str, build: Callable[[], PageResult]) -> PageResult:
        try:
            return build()
        except Exception as e:
            logger.exception(f"Failed to build page {key}")
            raise PageBuildError(f"Failed to build page {key}") from e

    def _store(self, key: str, result: PageResult) -> None:
        # Not-found results are not cached so a record created later shows up
        if result.not_found:
            self._pages.pop(key, None)
        else:
            self._pages[key] = CachedPage(result=result, built_at=self.clock())

    def _generate(self, key: str, build: Callable[[], PageResult], pending: Future) -> PageResult:
        try:
            result = self._build(key, build)
        except PageBuildError as e:
            # a stale page, if any, stays cached and the next request retries
            with self._lock:
                self._inflight.pop(key, None)
            pending.set_exception(e)
            raise

        with self._lock:
            self._store(key, result)
            self._inflight.pop(key, None)
        pending.set_result(result)
        return result

    def _regenerate(self, key: str, build: Callable[[], PageResult], pending: Future) -> None:
        try:
            self._generate(key, build, pending)
        except PageBuildError:
            return
        logger.info(f"Regenerated page {key}")
