import asyncio

import pytest

from speaking_practice.recorder.timer import ElapsedTicker, format_elapsed, round_seconds


@pytest.mark.parametrize(
    "seconds, expected",
    [(0, "00:00"), (0.99, "00:00"), (7.2, "00:07"), (59.9, "00:59"), (60, "01:00"), (754.5, "12:34"), (-3, "00:00")],
)
def test_format_elapsed(seconds, expected):
    assert format_elapsed(seconds) == expected


def test_round_seconds_rounds_half_up():
    assert round_seconds(2.49) == 2
    assert round_seconds(2.5) == 3
    assert round_seconds(3.5) == 4
    assert round_seconds(0.0) == 0


@pytest.mark.asyncio
async def test_ticker_updates_and_stops(fake_clock):
    ticks: list[str] = []
    ticker = ElapsedTicker(ticks.append, interval=0.001, clock=fake_clock)

    ticker.start()
    assert ticks == ["00:00"]
    assert ticker.running

    fake_clock.advance(65.4)
    await asyncio.sleep(0.01)
    assert ticks[-1] == "01:05"

    fake_clock.advance(0.2)
    duration = ticker.stop()
    assert duration == 66
    assert not ticker.running

    count = len(ticks)
    fake_clock.advance(10)
    await asyncio.sleep(0.01)
    assert len(ticks) == count


@pytest.mark.asyncio
async def test_ticker_display_never_decreases(fake_clock):
    ticks: list[str] = []
    ticker = ElapsedTicker(ticks.append, interval=0.001, clock=fake_clock)
    ticker.start()

    for step in (1.0, 2.0, -1.5, 3.0):
        fake_clock.advance(step)
        await asyncio.sleep(0.005)

    ticker.cancel()
    assert ticks == sorted(ticks)


@pytest.mark.asyncio
async def test_cancel_is_idempotent(fake_clock):
    ticker = ElapsedTicker(lambda _: None, interval=0.001, clock=fake_clock)
    ticker.start()

    ticker.cancel()
    ticker.cancel()

    assert ticker.stop() == 0
