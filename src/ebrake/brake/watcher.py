from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable

import httpx

from ebrake.brake.actions import TriggerAction, TriggerEvent
from ebrake.brake.breaker import EBrake
from ebrake.brake.client import check_health
from ebrake.config import HealthCheckConfig

logger = logging.getLogger(__name__)

TriggerCallback = Callable[[TriggerEvent], Awaitable[None]]


async def watch(
    brake: EBrake,
    target: HealthCheckConfig,
    action: TriggerAction,
    *,
    client: httpx.AsyncClient | None = None,
    on_trigger: TriggerCallback | None = None,
) -> None:
    """Poll ``target`` every ``interval_sec`` and feed each result to ``brake``.

    Runs until cancelled or until ``action`` raises. The brake belongs to this
    loop for its whole lifetime; trips are reported through ``on_trigger``.
    """
    logger.info(
        "starting health watch",
        extra={**target.to_metadata(), "window_size": brake.window_size, "tolerance": brake.tolerance},
    )
    if client is None:
        async with httpx.AsyncClient() as owned:
            await _poll(owned, brake, target, action, on_trigger)
    else:
        await _poll(client, brake, target, action, on_trigger)


def spawn_watch(
    brake: EBrake,
    target: HealthCheckConfig,
    action: TriggerAction,
    *,
    client: httpx.AsyncClient | None = None,
    on_trigger: TriggerCallback | None = None,
) -> asyncio.Task[None]:
    return asyncio.create_task(
        watch(brake, target, action, client=client, on_trigger=on_trigger),
        name=f"ebrake-watch:{target.url}",
    )


async def _poll(
    client: httpx.AsyncClient,
    brake: EBrake,
    target: HealthCheckConfig,
    action: TriggerAction,
    on_trigger: TriggerCallback | None,
) -> None:
    started_mono = time.perf_counter()
    tick = 0
    while True:
        await _sleep_until_time(started_mono + tick * target.interval_sec)
        tick += 1
        healthy = await check_health(client, target)
        if brake.trigger_on_sample(healthy, action) and on_trigger:
            await on_trigger(brake.snapshot())


async def _sleep_until_time(target: float) -> None:
    delay = max(0.0, target - time.perf_counter())
    if delay > 0:
        await asyncio.sleep(delay)
    else:
        await asyncio.sleep(0)
