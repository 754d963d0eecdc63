"""
Network reachability check.

Probed before every remote attempt so offline devices skip the remote
path instead of waiting on a failing request.
"""

from __future__ import annotations

import httpx
from loguru import logger


class ConnectivityChecker:
    """Decides whether the device is online by probing a lightweight URL."""

    def __init__(
        self,
        probe_url: str,
        timeout_seconds: float = 3.0,
        offline_mode: bool = False,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.probe_url = probe_url
        self.offline_mode = offline_mode
        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_seconds),
            transport=transport,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    async def is_connected(self) -> bool:
        """
        Check if the network is reachable.

        Returns:
            True if the probe answered with a non-5xx status, False otherwise
        """
        if self.offline_mode:
            return False

        try:
            response = await self.client.get(self.probe_url)
            return response.status_code < 500

        except httpx.HTTPError as exc:
            logger.debug("Connectivity probe failed: {}", exc)
            return False
