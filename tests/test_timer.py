"""Unit tests for the frame tick source."""

from __future__ import annotations

import asyncio

import pytest

from astrowheel.animation.timer import Timer


class Clock:
    def __init__(self, initial: float = 0.0) -> None:
        self.value = initial

    def advance(self, seconds: float) -> None:
        self.value += seconds

    def __call__(self) -> float:
        return self.value


def test_timer_requires_callable() -> None:
    with pytest.raises(TypeError, match="param 'callback' has to be a function."):
        Timer("not callable")  # type: ignore[arg-type]


def test_timer_is_idle_until_started() -> None:
    timer = Timer(lambda delta: None)
    assert timer.is_running() is False


def test_stop_when_idle_is_noop() -> None:
    timer = Timer(lambda delta: None)
    timer.stop()
    timer.stop()
    assert timer.is_running() is False


def test_timer_ticks_with_elapsed_milliseconds() -> None:
    clock = Clock(10.0)
    deltas: list[float] = []

    async def _exercise() -> None:
        done = asyncio.Event()

        def on_tick(delta: float) -> None:
            deltas.append(delta)
            clock.advance(0.016)
            if len(deltas) == 4:
                timer.stop()
                done.set()

        timer = Timer(on_tick, interval=0.001, clock=clock)
        timer.start()
        await asyncio.wait_for(done.wait(), timeout=5.0)
        assert timer.is_running() is False

    asyncio.run(_exercise())

    assert deltas[0] == pytest.approx(0.0)
    assert deltas[1:] == pytest.approx([16.0, 16.0, 16.0])


def test_first_tick_runs_synchronously_on_start() -> None:
    seen: list[float] = []

    async def _exercise() -> None:
        timer = Timer(seen.append, interval=0.5, clock=Clock())
        timer.start()
        assert len(seen) == 1
        timer.stop()

    asyncio.run(_exercise())
    assert len(seen) == 1


def test_start_twice_does_not_double_schedule() -> None:
    seen: list[float] = []

    async def _exercise() -> None:
        timer = Timer(seen.append, interval=0.01, clock=Clock())
        timer.start()
        timer.start()
        await asyncio.sleep(0.035)
        timer.stop()
        timer.stop()

    asyncio.run(_exercise())
    assert 2 <= len(seen) <= 6


def test_no_ticks_after_stop() -> None:
    seen: list[float] = []

    async def _exercise() -> None:
        timer = Timer(seen.append, interval=0.005, clock=Clock())
        timer.start()
        timer.stop()
        await asyncio.sleep(0.03)

    asyncio.run(_exercise())
    assert seen == [0.0]


def test_start_requires_running_loop() -> None:
    timer = Timer(lambda delta: None)
    with pytest.raises(RuntimeError):
        timer.start()
    assert timer.is_running() is False


def test_failing_callback_leaves_timer_restartable() -> None:
    calls: list[float] = []

    def on_tick(delta: float) -> None:
        calls.append(delta)
        raise ValueError("frame failed")

    async def _exercise() -> None:
        timer = Timer(on_tick, clock=Clock())
        with pytest.raises(ValueError, match="frame failed"):
            timer.start()
        assert timer.is_running() is False
        with pytest.raises(ValueError, match="frame failed"):
            timer.start()

    asyncio.run(_exercise())
    assert len(calls) == 2
