import asyncio

import pytest

from client.poller import RefreshPoller


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture()
def clock():
    return FakeClock()


def _poller(clock, calls, received=None):
    async def refresh():
        calls.append(clock.now)
        return ['refreshed']

    return RefreshPoller(
        refresh=refresh,
        on_refresh=received.append if received is not None else None,
        interval=10,
        debounce_window=60,
        clock=clock
    )


def test_polls_when_user_never_acted(clock):
    assert _poller(clock, []).should_poll()


def test_skips_poll_within_debounce_window(clock):
    poller = _poller(clock, [])
    poller.note_user_action()

    assert not poller.should_poll(clock.now + 59)
    assert poller.should_poll(clock.now + 60)


async def test_tick_respects_debounce(clock):
    calls, received = [], []
    poller = _poller(clock, calls, received)

    poller.note_user_action()
    clock.now += 30
    assert await poller.tick() is False

    clock.now += 30
    assert await poller.tick() is True
    assert calls == [1060.0]
    assert received == [['refreshed']]


async def test_run_survives_refresh_errors():
    calls = []

    async def refresh():
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("boom")
        return []

    poller = RefreshPoller(refresh=refresh, interval=0, debounce_window=60)
    poller.start()
    for _ in range(20):
        await asyncio.sleep(0)
        if len(calls) >= 2:
            break
    await poller.stop()

    assert len(calls) >= 2
