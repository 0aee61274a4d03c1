"""Unit tests for the scheduler abstraction."""

import asyncio

import pytest

from lifetrack.scheduler import (
    AsyncioScheduler,
    CancellationToken,
    VirtualScheduler,
    create_scheduler,
)


class TestCancellationToken:
    """Tests for CancellationToken."""

    def test_cancel_is_idempotent(self) -> None:
        """Test the cancel hook runs only once."""
        calls: list[int] = []
        token = CancellationToken(on_cancel=lambda: calls.append(1))

        token.cancel()
        token.cancel()

        assert token.cancelled
        assert calls == [1]


class TestVirtualScheduler:
    """Tests for VirtualScheduler."""

    @pytest.fixture
    def scheduler(self) -> VirtualScheduler:
        return VirtualScheduler()

    def test_fires_once_per_interval(self, scheduler: VirtualScheduler) -> None:
        """Test a 1 second schedule fires once per virtual second."""
        ticks: list[float] = []
        scheduler.schedule(1.0, lambda: ticks.append(scheduler.now))

        fired = scheduler.advance(5)

        assert fired == 5
        assert ticks == [1.0, 2.0, 3.0, 4.0, 5.0]
        assert scheduler.now == 5

    def test_nothing_fires_before_first_interval(self, scheduler: VirtualScheduler) -> None:
        """Test the first tick comes one interval after scheduling."""
        ticks: list[int] = []
        scheduler.schedule(30.0, lambda: ticks.append(1))

        scheduler.advance(29.5)

        assert ticks == []

    def test_cancel_stops_ticks(self, scheduler: VirtualScheduler) -> None:
        """Test a cancelled schedule never fires again."""
        ticks: list[int] = []
        token = scheduler.schedule(1.0, lambda: ticks.append(1))

        scheduler.advance(3)
        token.cancel()
        scheduler.advance(3)

        assert len(ticks) == 3
        assert scheduler.pending == 0

    def test_independent_schedules_interleave(self, scheduler: VirtualScheduler) -> None:
        """Test two schedules fire in virtual-time order."""
        order: list[str] = []
        scheduler.schedule(1.0, lambda: order.append("tick"))
        scheduler.schedule(2.5, lambda: order.append("refresh"))

        scheduler.advance(3)

        assert order == ["tick", "tick", "refresh", "tick"]

    def test_shutdown_cancels_everything(self, scheduler: VirtualScheduler) -> None:
        """Test shutdown cancels all outstanding tokens."""
        first = scheduler.schedule(1.0, lambda: None)
        second = scheduler.schedule(2.0, lambda: None)

        scheduler.shutdown()

        assert first.cancelled and second.cancelled
        assert scheduler.advance(10) == 0

    def test_rejects_non_positive_interval(self, scheduler: VirtualScheduler) -> None:
        """Test zero or negative intervals are rejected."""
        with pytest.raises(ValueError):
            scheduler.schedule(0, lambda: None)

    def test_sync_advance_rejects_async_callback(self, scheduler: VirtualScheduler) -> None:
        """Test advance() refuses coroutine callbacks."""

        async def callback() -> None:
            return None

        scheduler.schedule(1.0, callback)

        with pytest.raises(TypeError):
            scheduler.advance(1)

    @pytest.mark.asyncio
    async def test_advance_async_awaits_callbacks(self, scheduler: VirtualScheduler) -> None:
        """Test advance_async awaits coroutine callbacks."""
        done: list[float] = []

        async def callback() -> None:
            await asyncio.sleep(0)
            done.append(scheduler.now)

        scheduler.schedule(10.0, callback)

        await scheduler.advance_async(30)

        assert done == [10.0, 20.0, 30.0]


class TestAsyncioScheduler:
    """Tests for AsyncioScheduler on a real event loop."""

    @pytest.mark.asyncio
    async def test_ticks_until_cancelled(self) -> None:
        """Test periodic ticks stop after cancellation."""
        scheduler = AsyncioScheduler()
        ticks: list[int] = []
        token = scheduler.schedule(0.01, lambda: ticks.append(1))

        await asyncio.sleep(0.1)
        token.cancel()
        count = len(ticks)
        await asyncio.sleep(0.05)

        assert count >= 2
        assert len(ticks) == count
        assert scheduler.active_count == 0

    @pytest.mark.asyncio
    async def test_failing_callback_keeps_schedule_alive(self) -> None:
        """Test an exception in one tick does not end the schedule."""
        scheduler = AsyncioScheduler()
        calls: list[int] = []

        def flaky() -> None:
            calls.append(1)
            if len(calls) == 1:
                raise RuntimeError("first tick fails")

        scheduler.schedule(0.01, flaky)
        await asyncio.sleep(0.1)
        scheduler.shutdown()

        assert len(calls) >= 2

    @pytest.mark.asyncio
    async def test_ticks_do_not_overlap(self) -> None:
        """Test a slow async tick finishes before the next one starts."""
        scheduler = AsyncioScheduler()
        running = 0
        max_running = 0

        async def slow() -> None:
            nonlocal running, max_running
            running += 1
            max_running = max(max_running, running)
            await asyncio.sleep(0.03)
            running -= 1

        scheduler.schedule(0.01, slow)
        await asyncio.sleep(0.15)
        scheduler.shutdown()

        assert max_running == 1

    @pytest.mark.asyncio
    async def test_aclose_waits_for_running_tick(self) -> None:
        """Test aclose returns only after an interrupted tick has unwound."""
        scheduler = AsyncioScheduler()
        started = asyncio.Event()
        unwound: list[bool] = []

        async def long_tick() -> None:
            started.set()
            try:
                await asyncio.sleep(10)
            finally:
                unwound.append(True)

        scheduler.schedule(0.01, long_tick)
        await asyncio.wait_for(started.wait(), 1)

        await scheduler.aclose()

        assert unwound == [True]
        assert scheduler.active_count == 0


class TestCreateScheduler:
    """Tests for the scheduler factory."""

    def test_mock_returns_virtual(self) -> None:
        assert isinstance(create_scheduler(use_mock=True), VirtualScheduler)

    def test_default_returns_asyncio(self) -> None:
        assert isinstance(create_scheduler(), AsyncioScheduler)
