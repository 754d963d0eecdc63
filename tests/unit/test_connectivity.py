"""
Unit tests for the connectivity probe.
"""

import pytest
import pytest_asyncio
from httpx import ConnectError, Request, Response, TimeoutException

from korkort.remote import ConnectivityChecker

PROBE_URL = "http://probe.local/generate_204"


@pytest_asyncio.fixture
async def checker():
    checker = ConnectivityChecker(probe_url=PROBE_URL, timeout_seconds=1)
    yield checker
    await checker.close()


class TestConnectivityChecker:
    """Tests for ConnectivityChecker.is_connected."""

    @pytest.mark.asyncio
    async def test_online(self, checker, monkeypatch):
        async def mock_get(url, **kwargs):
            return Response(204, request=Request("GET", url))

        monkeypatch.setattr(checker.client, "get", mock_get)
        assert await checker.is_connected() is True

    @pytest.mark.asyncio
    async def test_server_error_means_offline(self, checker, monkeypatch):
        async def mock_get(url, **kwargs):
            return Response(503, request=Request("GET", url))

        monkeypatch.setattr(checker.client, "get", mock_get)
        assert await checker.is_connected() is False

    @pytest.mark.asyncio
    async def test_connect_error(self, checker, monkeypatch):
        async def mock_get(url, **kwargs):
            raise ConnectError("no route", request=Request("GET", url))

        monkeypatch.setattr(checker.client, "get", mock_get)
        assert await checker.is_connected() is False

    @pytest.mark.asyncio
    async def test_timeout(self, checker, monkeypatch):
        async def mock_get(url, **kwargs):
            raise TimeoutException("slow")

        monkeypatch.setattr(checker.client, "get", mock_get)
        assert await checker.is_connected() is False

    @pytest.mark.asyncio
    async def test_offline_mode_skips_probe(self, monkeypatch):
        checker = ConnectivityChecker(probe_url=PROBE_URL, offline_mode=True)
        called = False

        async def mock_get(url, **kwargs):
            nonlocal called
            called = True
            return Response(204, request=Request("GET", url))

        monkeypatch.setattr(checker.client, "get", mock_get)
        try:
            assert await checker.is_connected() is False
            assert called is False
        finally:
            await checker.close()
