import asyncio

import pytest

from echochat.client.timer import CountdownTimer


class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_idle_timer():
    timer = CountdownTimer(clock=FakeClock())
    assert timer.remaining == 0
    assert not timer.running
    assert timer.expired


def test_counts_down_in_whole_seconds():
    clock = FakeClock()
    timer = CountdownTimer(clock=clock)
    timer.start(60)
    assert timer.remaining == 60
    clock.now = 0.5
    assert timer.remaining == 60
    clock.now = 59.2
    assert timer.remaining == 1
    clock.now = 60
    assert timer.remaining == 0
    assert timer.expired


def test_restart_replaces_deadline():
    clock = FakeClock()
    timer = CountdownTimer(clock=clock)
    timer.start(60)
    clock.now = 50
    timer.start(60)
    assert timer.remaining == 60


def test_cancel_stops_countdown():
    timer = CountdownTimer(clock=FakeClock())
    timer.start(60)
    timer.cancel()
    assert timer.remaining == 0
    assert not timer.running


@pytest.mark.asyncio
async def test_wait_returns_true_when_elapsed():
    timer = CountdownTimer()
    timer.start(0.01)
    assert await timer.wait() is True


@pytest.mark.asyncio
async def test_wait_returns_false_when_cancelled():
    timer = CountdownTimer()
    timer.start(30)
    waiter = asyncio.create_task(timer.wait())
    await asyncio.sleep(0)
    timer.cancel()
    assert await asyncio.wait_for(waiter, timeout=1) is False
