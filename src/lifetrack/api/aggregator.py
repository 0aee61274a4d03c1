"""Dashboard data aggregation.

Fetches many independent remote sources concurrently and merges them
into one DashboardSnapshot. A failing source becomes an error marker in
the snapshot; it never affects its siblings or the caller.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from .cache import ResultCache
from .client import ActivityApiClient
from .errors import ApiError, SourceFetchError
from .snapshot import DashboardSnapshot, SourceFailure

logger = logging.getLogger(__name__)

Fetcher = Callable[[], Awaitable[Any]]

STATUS_KEYS = ("systemStatus", "monitorStatus", "currentSession", "todayMonitorSessions")
AI_KEYS = ("aiStatus", "aiInsights")

_NOT_CACHED = object()


def _failure(name: str, error: BaseException) -> SourceFailure:
    if isinstance(error, asyncio.TimeoutError):
        reason = "Request timed out"
    else:
        reason = str(error) or type(error).__name__
    return SourceFailure(
        source=name,
        reason=reason,
        status_code=getattr(error, "status_code", None),
    )


async def settle_all(
    fetchers: Mapping[str, Fetcher],
    timeout: float | None = None,
) -> dict[str, Any]:
    """Run all fetchers concurrently and wait for every one to settle.

    Args:
        fetchers: Source name to zero-argument coroutine function
        timeout: Optional per-fetch timeout in seconds

    Returns:
        Source name to payload, or SourceFailure for sources that failed.
        Every requested name is present.
    """

    async def settle(name: str, fetch: Fetcher) -> Any:
        try:
            if timeout is None:
                return await fetch()
            return await asyncio.wait_for(fetch(), timeout)
        except Exception as e:
            logger.warning(f"Source {name} failed: {e!r}")
            return _failure(name, e)

    names = list(fetchers)
    results = await asyncio.gather(*(settle(name, fetchers[name]) for name in names))
    return dict(zip(names, results))


@dataclass(frozen=True)
class DataSource:
    """A named remote read.

    Attributes:
        name: Logical source name, used as the snapshot key
        fetch: Coroutine function performing the read
        cacheable: Whether results may be served from the TTL cache
        in_refresh: Whether refresh() includes this source
    """

    name: str
    fetch: Fetcher
    cacheable: bool = True
    in_refresh: bool = True


def dashboard_sources(client: ActivityApiClient, recent_limit: int = 15) -> list[DataSource]:
    """Build the standard dashboard sources for a client."""
    return [
        DataSource("systemStatus", client.get_system_status),
        DataSource("monitorStatus", client.get_monitor_status),
        DataSource("currentSession", client.get_current_session, cacheable=False),
        DataSource("todaySummary", client.get_today_summary),
        DataSource("timeAnalysis", client.get_time_of_day_analysis),
        DataSource("recentSessions", lambda: client.get_recent_sessions(recent_limit)),
        DataSource("categories", client.get_categories),
        DataSource("categoryStats", client.get_category_stats),
        DataSource("databaseHealth", client.get_database_health),
        DataSource("databaseStats", client.get_database_stats),
        DataSource("todayMonitorSessions", client.get_today_monitor_sessions),
    ]


def ai_sources(client: ActivityApiClient) -> list[DataSource]:
    """AI insight sources, fetched on demand rather than on every refresh."""
    return [
        DataSource("aiStatus", client.get_ai_status, in_refresh=False),
        DataSource("aiInsights", client.get_ai_insights, in_refresh=False),
    ]


class DashboardAggregator:
    """Produces dashboard snapshots from independently fetchable sources.

    Owns a private result cache. Overlapping refresh() calls are not
    queued: while one is in flight, further calls return the last
    published snapshot.
    """

    def __init__(
        self,
        sources: Iterable[DataSource],
        cache: ResultCache | None = None,
        timeout: float | None = None,
        client: ActivityApiClient | None = None,
    ) -> None:
        """Initialize aggregator.

        Args:
            sources: Data sources to fetch; names must be unique
            cache: Result cache (a 30 second cache by default)
            timeout: Optional per-source timeout in seconds
            client: Client used by the cache-invalidating mutations
        """
        self._sources: dict[str, DataSource] = {}
        for source in sources:
            if source.name in self._sources:
                raise ValueError(f"Duplicate data source: {source.name}")
            self._sources[source.name] = source

        self._cache = cache if cache is not None else ResultCache()
        self._timeout = timeout
        self._client = client
        self._latest: DashboardSnapshot | None = None
        self._refreshing = False
        self._inflight: dict[str, asyncio.Future[Any]] = {}
        self._shared: set[asyncio.Future[Any]] = set()

    @classmethod
    def for_client(
        cls,
        client: ActivityApiClient,
        recent_limit: int = 15,
        cache: ResultCache | None = None,
        timeout: float | None = None,
    ) -> "DashboardAggregator":
        """Create an aggregator over the standard dashboard and AI sources."""
        sources = dashboard_sources(client, recent_limit) + ai_sources(client)
        return cls(sources, cache=cache, timeout=timeout, client=client)

    @property
    def source_names(self) -> list[str]:
        return list(self._sources)

    @property
    def latest(self) -> DashboardSnapshot | None:
        """Last published snapshot, or None before the first refresh."""
        return self._latest

    @property
    def is_refreshing(self) -> bool:
        return self._refreshing

    def _start_fetch(self, source: DataSource) -> "asyncio.Future[Any]":
        """Start one shared network read for a cacheable source."""
        task = asyncio.ensure_future(source.fetch())
        self._inflight[source.name] = task
        self._shared.add(task)

        def settled(done: "asyncio.Future[Any]") -> None:
            self._shared.discard(done)
            # Superseded by an invalidation while in flight
            if self._inflight.get(source.name) is not task:
                if not done.cancelled():
                    done.exception()
                return
            del self._inflight[source.name]
            if done.cancelled():
                return
            if done.exception() is None:
                self._cache.set(source.name, done.result())

        task.add_done_callback(settled)
        return task

    def _reader(self, source: DataSource) -> Fetcher:
        async def read() -> Any:
            if not source.cacheable:
                return await source.fetch()

            cached = self._cache.get(source.name, _NOT_CACHED)
            if cached is not _NOT_CACHED:
                return cached

            # Concurrent readers of one key share a single request
            pending = self._inflight.get(source.name)
            if pending is None:
                pending = self._start_fetch(source)
            else:
                logger.debug(f"Joining in-flight read: {source.name}")
            return await asyncio.shield(pending)

        return read

    async def cancel_pending(self) -> None:
        """Cancel shared reads still in flight and wait for them to unwind."""
        pending = list(self._shared)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._inflight.clear()

    async def refresh(self) -> DashboardSnapshot | None:
        """Fetch every refresh source and publish a new snapshot.

        Never raises for source failures.

        Returns:
            The new snapshot, or the previous one if a refresh was already
            in flight (None if there is none yet)
        """
        if self._refreshing:
            logger.debug("Refresh already in flight, skipping")
            return self._latest

        self._refreshing = True
        try:
            fetchers = {
                name: self._reader(source)
                for name, source in self._sources.items()
                if source.in_refresh
            }
            results = await settle_all(fetchers, timeout=self._timeout)
            snapshot = DashboardSnapshot(results)
            self._latest = snapshot
        finally:
            self._refreshing = False

        failed = len(snapshot.failures)
        if failed:
            logger.info(f"Dashboard refreshed: {len(snapshot) - failed}/{len(snapshot)} sources ok")
        else:
            logger.info(f"Dashboard refreshed: {len(snapshot)} sources")
        return snapshot

    async def fetch(self, name: str) -> Any:
        """Read one source through the cache.

        Raises:
            KeyError: If no source has this name
            SourceFetchError: If the read failed
        """
        source = self._sources[name]
        try:
            if self._timeout is None:
                return await self._reader(source)()
            return await asyncio.wait_for(self._reader(source)(), self._timeout)
        except Exception as e:
            failure = _failure(name, e)
            raise SourceFetchError(name, failure.reason, failure.status_code) from e

    def invalidate(self, *keys: str) -> None:
        self._cache.invalidate(*keys)
        for key in keys:
            self._inflight.pop(key, None)

    def clear_cache(self) -> None:
        self._cache.clear()
        self._inflight.clear()

    def _require_client(self) -> ActivityApiClient:
        if self._client is None:
            raise RuntimeError("This aggregator has no API client for write operations")
        return self._client

    async def start_monitor(self) -> Any:
        result = await self._require_client().start_monitor()
        self.invalidate(*STATUS_KEYS)
        return result

    async def stop_monitor(self) -> Any:
        result = await self._require_client().stop_monitor()
        self.invalidate(*STATUS_KEYS)
        return result

    async def update_monitor_config(self, **settings: Any) -> Any:
        result = await self._require_client().update_monitor_config(**settings)
        self.invalidate(*STATUS_KEYS)
        return result

    async def learn_from_session(self, session: Mapping[str, Any]) -> bool:
        """Submit a finished session for learning.

        Failures are logged and reported as False; learning is optional.
        """
        try:
            await self._require_client().learn_from_session(session)
        except ApiError as e:
            logger.warning(f"Learning from session failed: {e}")
            return False
        self.invalidate(*AI_KEYS)
        return True

    async def retrain_models(self) -> None:
        await self._require_client().retrain_models()
        self.clear_cache()

    async def import_ai_data(self, data: Any) -> None:
        await self._require_client().import_ai_data(data)
        self.clear_cache()

    async def import_category_rules(self, data: str) -> Any:
        result = await self._require_client().import_category_rules(data)
        self.clear_cache()
        return result


__all__ = [
    "AI_KEYS",
    "DashboardAggregator",
    "DataSource",
    "STATUS_KEYS",
    "ai_sources",
    "dashboard_sources",
    "settle_all",
]
