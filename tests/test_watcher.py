from __future__ import annotations

import asyncio

import httpx
import pytest

from ebrake.brake import BrakeTripped, EBrake, LogOnly, Panic, TriggerEvent, spawn_watch, watch
from ebrake.config import HealthCheckConfig

TARGET = HealthCheckConfig(url="http://service.test/health", interval_sec=0.0)


def _client(statuses: list[int]) -> httpx.AsyncClient:
    remaining = iter(statuses)

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(next(remaining, 200))

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_panic_escapes_watch_once_tolerance_exceeded() -> None:
    brake = EBrake(3, 1)
    async with _client([500, 200, 500]) as client:
        with pytest.raises(BrakeTripped) as info:
            await asyncio.wait_for(watch(brake, TARGET, Panic(), client=client), timeout=5)
    assert info.value.event.failures == 2
    assert brake.window == (False, True, False)


@pytest.mark.asyncio
async def test_trips_are_reported_through_callback() -> None:
    events: asyncio.Queue[TriggerEvent] = asyncio.Queue()
    brake = EBrake(2, 0)
    async with _client([200, 200, 503]) as client:
        task = spawn_watch(brake, TARGET, LogOnly(), client=client, on_trigger=events.put)
        event = await asyncio.wait_for(events.get(), timeout=5)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
    assert event.failures == 1
    assert event.samples == 2


@pytest.mark.asyncio
async def test_healthy_target_never_trips() -> None:
    events: list[TriggerEvent] = []

    async def record(event: TriggerEvent) -> None:
        events.append(event)

    brake = EBrake(2, 0)
    async with _client([]) as client:
        task = spawn_watch(brake, TARGET, Panic(), client=client, on_trigger=record)
        while len(brake) < 2:
            await asyncio.sleep(0.01)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
    assert events == []
    assert brake.failures == 0


@pytest.mark.asyncio
async def test_first_check_runs_without_waiting_an_interval() -> None:
    slow = HealthCheckConfig(url="http://service.test/health", interval_sec=60.0)
    brake = EBrake(1, 0)
    async with _client([500]) as client:
        with pytest.raises(BrakeTripped):
            await asyncio.wait_for(watch(brake, slow, Panic(), client=client), timeout=5)
    assert brake.window == (False,)
