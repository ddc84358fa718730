"""Tests for the resend cooldown timer (manual clock, no real sleeping)."""

import pytest

from cityprodrivers.services.cooldown import CooldownTimer


@pytest.mark.asyncio
async def test_countdown_reaches_zero(clock):
    """A cooldown of D ticks reaches zero after exactly D ticks."""
    ticks = []
    timer = CooldownTimer(sleep=clock.sleep, on_tick=ticks.append)
    timer.start(3)
    assert timer.remaining == 3 and timer.active

    await clock.advance(2)
    assert timer.remaining == 1

    await clock.advance(1)
    assert timer.remaining == 0
    assert not timer.active
    assert ticks == [2, 1, 0]


@pytest.mark.asyncio
async def test_restart_cancels_previous_countdown(clock):
    """Restarting never leaves two countdowns decrementing together."""
    timer = CooldownTimer(sleep=clock.sleep)
    timer.start(5)
    await clock.advance(2)
    assert timer.remaining == 3

    timer.start(4)
    await clock.advance(1)
    assert timer.remaining == 3

    await clock.advance(3)
    assert timer.remaining == 0


@pytest.mark.asyncio
async def test_cancel_resets_remaining(clock):
    timer = CooldownTimer(sleep=clock.sleep)
    timer.start(10)
    await clock.advance(1)
    timer.cancel()
    assert timer.remaining == 0
    await clock.advance(1)
    assert timer.remaining == 0


@pytest.mark.asyncio
async def test_start_zero_is_inactive():
    timer = CooldownTimer()
    timer.start(0)
    assert not timer.active
    await timer.wait()


@pytest.mark.asyncio
async def test_wait_returns_when_done(clock):
    timer = CooldownTimer(sleep=clock.sleep)
    timer.start(1)
    await clock.advance(1)
    await timer.wait()
    assert timer.remaining == 0
