"""Unit tests for dashboard aggregation."""

import asyncio
from typing import Any

import pytest

from lifetrack.api import (
    ApiError,
    DashboardAggregator,
    DataSource,
    ResultCache,
    SourceFailure,
    SourceFetchError,
    settle_all,
)


class ManualClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class CountingSource:
    """Fake fetch function that counts calls and optionally fails."""

    def __init__(self, value: Any = None, error: Exception | None = None) -> None:
        self.value = value
        self.error = error
        self.calls = 0

    async def __call__(self) -> Any:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.value


class FakeClient:
    """Records write calls made through the aggregator."""

    def __init__(self, learn_error: Exception | None = None) -> None:
        self.calls: list[str] = []
        self.learn_error = learn_error

    async def start_monitor(self) -> dict[str, bool]:
        self.calls.append("start_monitor")
        return {"success": True}

    async def learn_from_session(self, session: dict[str, Any]) -> None:
        self.calls.append("learn_from_session")
        if self.learn_error is not None:
            raise self.learn_error

    async def retrain_models(self) -> None:
        self.calls.append("retrain_models")


class TestSettleAll:
    """Tests for settle_all."""

    @pytest.mark.asyncio
    async def test_failures_are_isolated(self) -> None:
        """Test one failing fetch does not affect the others."""
        results = await settle_all(
            {
                "ok": CountingSource({"a": 1}),
                "broken": CountingSource(error=ApiError("HTTP error 500", status_code=500)),
            }
        )

        assert results["ok"] == {"a": 1}
        failure = results["broken"]
        assert isinstance(failure, SourceFailure)
        assert failure.status_code == 500
        assert failure.to_dict() == {"error": "HTTP error 500"}

    @pytest.mark.asyncio
    async def test_timeout_becomes_failure(self) -> None:
        async def slow() -> None:
            await asyncio.sleep(10)

        results = await settle_all({"slow": slow}, timeout=0.01)

        assert results["slow"].reason == "Request timed out"


class TestRefresh:
    """Tests for DashboardAggregator.refresh."""

    @pytest.fixture
    def clock(self) -> ManualClock:
        return ManualClock()

    @pytest.mark.asyncio
    async def test_all_sources_failing_still_publishes(self) -> None:
        """Test a refresh resolves even when every source fails."""
        aggregator = DashboardAggregator(
            [
                DataSource("systemStatus", CountingSource(error=ConnectionError("refused"))),
                DataSource("categories", CountingSource(error=ApiError("boom"))),
            ]
        )

        snapshot = await aggregator.refresh()

        assert snapshot is not None
        assert set(snapshot.failures) == {"systemStatus", "categories"}
        assert snapshot.succeeded == []
        assert snapshot.to_dict()["categories"] == {"error": "boom"}
        assert aggregator.latest is snapshot

    @pytest.mark.asyncio
    async def test_cache_serves_within_ttl(self, clock: ManualClock) -> None:
        """Test repeated refreshes within the TTL reuse cached results."""
        status = CountingSource({"status": "running"})
        aggregator = DashboardAggregator(
            [DataSource("systemStatus", status)], cache=ResultCache(30, clock=clock)
        )

        await aggregator.refresh()
        clock.now = 10
        await aggregator.refresh()
        assert status.calls == 1

        clock.now = 31
        snapshot = await aggregator.refresh()
        assert status.calls == 2
        assert snapshot["systemStatus"] == {"status": "running"}  # type: ignore[index]

    @pytest.mark.asyncio
    async def test_uncacheable_source_always_fetched(self, clock: ManualClock) -> None:
        current = CountingSource(None)
        aggregator = DashboardAggregator(
            [DataSource("currentSession", current, cacheable=False)],
            cache=ResultCache(30, clock=clock),
        )

        await aggregator.refresh()
        await aggregator.refresh()

        assert current.calls == 2

    @pytest.mark.asyncio
    async def test_failures_are_not_cached(self, clock: ManualClock) -> None:
        flaky = CountingSource(error=ApiError("down"))
        aggregator = DashboardAggregator(
            [DataSource("databaseHealth", flaky)], cache=ResultCache(30, clock=clock)
        )

        await aggregator.refresh()
        flaky.error = None
        flaky.value = {"healthy": True}
        snapshot = await aggregator.refresh()

        assert snapshot["databaseHealth"] == {"healthy": True}  # type: ignore[index]

    @pytest.mark.asyncio
    async def test_overlapping_refresh_is_skipped(self) -> None:
        """Test a refresh started while one is in flight returns the latest snapshot."""
        release = asyncio.Event()
        calls = 0

        async def gated() -> str:
            nonlocal calls
            calls += 1
            await release.wait()
            return "done"

        aggregator = DashboardAggregator(
            [DataSource("todaySummary", gated, cacheable=False)]
        )

        first = asyncio.create_task(aggregator.refresh())
        await asyncio.sleep(0)
        assert aggregator.is_refreshing

        assert await aggregator.refresh() is None

        release.set()
        snapshot = await first
        assert calls == 1
        assert snapshot is not None
        assert snapshot["todaySummary"] == "done"
        assert not aggregator.is_refreshing

    @pytest.mark.asyncio
    async def test_on_demand_sources_excluded(self) -> None:
        """Test sources marked out of refresh are only fetched explicitly."""
        insights = CountingSource([{"title": "Focus"}])
        aggregator = DashboardAggregator(
            [
                DataSource("systemStatus", CountingSource({})),
                DataSource("aiInsights", insights, in_refresh=False),
            ]
        )

        snapshot = await aggregator.refresh()
        assert "aiInsights" not in snapshot  # type: ignore[operator]
        assert insights.calls == 0

        assert await aggregator.fetch("aiInsights") == [{"title": "Focus"}]

    def test_duplicate_names_rejected(self) -> None:
        with pytest.raises(ValueError):
            DashboardAggregator([DataSource("a", CountingSource()), DataSource("a", CountingSource())])


class TestFetch:
    """Tests for single-source fetches."""

    @pytest.mark.asyncio
    async def test_failure_raises_source_fetch_error(self) -> None:
        aggregator = DashboardAggregator(
            [DataSource("categories", CountingSource(error=ApiError("nope", status_code=404)))]
        )

        with pytest.raises(SourceFetchError) as exc_info:
            await aggregator.fetch("categories")

        assert exc_info.value.source == "categories"
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_concurrent_fetch_and_refresh_share_request(self) -> None:
        """Test a fetch racing a refresh for the same key makes one network call."""
        release = asyncio.Event()
        calls = 0

        async def gated() -> dict[str, bool]:
            nonlocal calls
            calls += 1
            await release.wait()
            return {"running": True}

        aggregator = DashboardAggregator([DataSource("systemStatus", gated)])

        refresh = asyncio.create_task(aggregator.refresh())
        single = asyncio.create_task(aggregator.fetch("systemStatus"))
        while calls == 0:
            await asyncio.sleep(0)
        for _ in range(5):
            await asyncio.sleep(0)
        release.set()

        snapshot = await refresh
        assert await single == {"running": True}
        assert snapshot["systemStatus"] == {"running": True}  # type: ignore[index]
        assert calls == 1

        assert await aggregator.fetch("systemStatus") == {"running": True}
        assert calls == 1

    @pytest.mark.asyncio
    async def test_invalidated_read_is_not_cached(self) -> None:
        """Test a read that was in flight across an invalidation is not cached."""
        release = asyncio.Event()
        source = CountingSource({"running": False})

        async def gated() -> Any:
            await release.wait()
            return await source()

        aggregator = DashboardAggregator([DataSource("monitorStatus", gated)])

        first = asyncio.create_task(aggregator.fetch("monitorStatus"))
        await asyncio.sleep(0)
        aggregator.invalidate("monitorStatus")
        release.set()
        await first

        await aggregator.fetch("monitorStatus")
        assert source.calls == 2

    @pytest.mark.asyncio
    async def test_cancel_pending(self) -> None:
        started = asyncio.Event()

        async def hang() -> None:
            started.set()
            await asyncio.sleep(10)

        aggregator = DashboardAggregator([DataSource("todaySummary", hang)])
        reader = asyncio.create_task(aggregator.fetch("todaySummary"))
        await asyncio.wait_for(started.wait(), 1)

        await aggregator.cancel_pending()

        with pytest.raises(asyncio.CancelledError):
            await reader

    @pytest.mark.asyncio
    async def test_unknown_source(self) -> None:
        with pytest.raises(KeyError):
            await DashboardAggregator([]).fetch("missing")


class TestMutations:
    """Tests for cache-invalidating write operations."""

    @pytest.mark.asyncio
    async def test_start_monitor_invalidates_status(self) -> None:
        """Test monitor writes force status sources to be refetched."""
        client = FakeClient()
        status = CountingSource({"running": False})
        categories = CountingSource([])
        aggregator = DashboardAggregator(
            [DataSource("monitorStatus", status), DataSource("categories", categories)],
            client=client,  # type: ignore[arg-type]
        )

        await aggregator.refresh()
        await aggregator.start_monitor()
        await aggregator.refresh()

        assert client.calls == ["start_monitor"]
        assert status.calls == 2
        assert categories.calls == 1

    @pytest.mark.asyncio
    async def test_retrain_clears_cache(self) -> None:
        client = FakeClient()
        categories = CountingSource([])
        aggregator = DashboardAggregator(
            [DataSource("categories", categories)],
            client=client,  # type: ignore[arg-type]
        )

        await aggregator.refresh()
        await aggregator.retrain_models()
        await aggregator.refresh()

        assert categories.calls == 2

    @pytest.mark.asyncio
    async def test_learn_from_session_is_best_effort(self) -> None:
        """Test a failed learning call reports False instead of raising."""
        aggregator = DashboardAggregator(
            [], client=FakeClient(learn_error=ApiError("offline"))  # type: ignore[arg-type]
        )

        assert await aggregator.learn_from_session({"id": "s1"}) is False

    @pytest.mark.asyncio
    async def test_writes_require_client(self) -> None:
        with pytest.raises(RuntimeError):
            await DashboardAggregator([]).start_monitor()
