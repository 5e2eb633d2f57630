from __future__ import annotations

import httpx
import pytest

from ebrake.brake import check_health
from ebrake.config import HealthCheckConfig

TARGET = HealthCheckConfig(url="http://service.test/health", timeout_sec=1.0)


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_success_status_is_healthy() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(204)

    async with _client(handler) as client:
        assert await check_health(client, TARGET) is True
    assert seen[0].method == "GET"
    assert str(seen[0].url) == TARGET.url


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [301, 404, 500, 503])
async def test_non_success_status_is_unhealthy(status: int) -> None:
    async with _client(lambda request: httpx.Response(status)) as client:
        assert await check_health(client, TARGET) is False


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        httpx.ConnectError("refused"),
        httpx.ReadTimeout("slow"),
        httpx.RemoteProtocolError("garbage"),
    ],
)
async def test_transport_errors_are_unhealthy(error: httpx.HTTPError) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise error

    async with _client(handler) as client:
        assert await check_health(client, TARGET) is False


@pytest.mark.asyncio
async def test_sends_configured_method_and_headers() -> None:
    seen: list[httpx.Request] = []
    target = HealthCheckConfig(
        url="http://service.test/ready",
        method="HEAD",
        headers={"X-Probe": "ebrake"},
    )

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200)

    async with _client(handler) as client:
        assert await check_health(client, target) is True
    assert seen[0].method == "HEAD"
    assert seen[0].headers["X-Probe"] == "ebrake"


@pytest.mark.asyncio
@pytest.mark.parametrize("url", ["http://[::1"])
async def test_malformed_url_is_unhealthy(url: str) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200)

    async with _client(handler) as client:
        assert await check_health(client, HealthCheckConfig(url=url)) is False
