from __future__ import annotations

import logging

import httpx

from ebrake.config import HealthCheckConfig

logger = logging.getLogger(__name__)


async def check_health(client: httpx.AsyncClient, target: HealthCheckConfig) -> bool:
    """Return ``True`` when ``target`` answers with a 2xx response.

    Timeouts, refused connections, protocol errors, malformed URLs and non-2xx
    statuses all collapse into ``False``.
    """
    try:
        resp = await client.request(
            target.method,
            target.url,
            headers=target.headers,
            timeout=target.timeout_sec,
        )
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        logger.debug(
            "health check failed",
            extra={"url": target.url, "error_type": type(exc).__name__},
        )
        return False
    if not resp.is_success:
        logger.debug(
            "health check returned non-success status",
            extra={"url": target.url, "status_code": resp.status_code},
        )
    return resp.is_success
