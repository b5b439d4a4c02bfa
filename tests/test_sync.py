"""
Tests for the synchronous API and convenience functions.
"""

from typing import Optional
from unittest.mock import AsyncMock, Mock, patch

import pytest

from geofeeds import convenience
from geofeeds.config import HurricaneConfig
from geofeeds.hurricane import HurricaneClient
from geofeeds.sync import AsyncSyncBridge, get_active_storms_sync
from geofeeds.utils import add_sync_version


class FakeClient:
    instances = []

    def __init__(self):
        self.closed = False
        FakeClient.instances.append(self)

    async def close(self):
        self.closed = True


class TestAsyncSyncBridge:
    """Test running coroutines synchronously."""

    def test_run_async(self):
        async def double(x):
            return x * 2

        assert AsyncSyncBridge.run_async(double, args=(21,)) == 42

    @pytest.mark.asyncio
    async def test_refuses_inside_running_loop(self):
        async def noop():
            return None

        with pytest.raises(RuntimeError, match="existing asyncio event loop"):
            AsyncSyncBridge.run_async(noop)

    def test_temporary_client_created_and_closed(self):
        FakeClient.instances = []

        async def uses_client(client: Optional[FakeClient] = None):
            return client

        result = AsyncSyncBridge.run_async(uses_client, client_class=FakeClient)

        assert isinstance(result, FakeClient)
        assert result.closed

    def test_given_client_not_closed(self):
        client = FakeClient()

        async def uses_client(client: Optional[FakeClient] = None):
            return client

        AsyncSyncBridge.run_async(
            uses_client, kwargs={"client": client}, client_class=FakeClient
        )
        assert not client.closed

    @pytest.mark.parametrize(
        "annotation,expected",
        [
            (Optional[FakeClient], FakeClient),
            (FakeClient, FakeClient),
            (Optional[str], str),
            ("FakeClient", None),
            (None, None),
        ],
    )
    def test_extract_client_class(self, annotation, expected):
        assert AsyncSyncBridge.extract_client_class(annotation) is expected


class TestAddSyncVersion:
    def test_sync_attribute(self):
        FakeClient.instances = []

        @add_sync_version
        async def count(n: int, client: Optional[FakeClient] = None):
            return n + len(FakeClient.instances)

        assert count.sync(1) == 2
        assert FakeClient.instances[0].closed

    def test_explicit_none_client_gets_temporary(self):
        FakeClient.instances = []

        @add_sync_version
        async def uses_client(client: Optional[FakeClient] = None):
            return client

        result = uses_client.sync(client=None)

        assert isinstance(result, FakeClient)
        assert result.closed
        assert FakeClient.instances == [result]

    def test_given_client_passed_through(self):
        given = FakeClient()
        FakeClient.instances = []

        @add_sync_version
        async def uses_client(client: Optional[FakeClient] = None):
            return client

        assert uses_client.sync(client=given) is given
        assert not given.closed
        assert FakeClient.instances == []


class TestConvenience:
    """Test the one-shot convenience functions with a mocked client."""

    @pytest.fixture
    def client(self, make_position):
        client = Mock(spec=HurricaneClient)
        client.config = HurricaneConfig()
        client.fetch_positions = AsyncMock(
            return_value=[make_position(hours=0), make_position(hours=6)]
        )
        return client

    @pytest.mark.asyncio
    async def test_get_active_storms(self, client):
        storms = await convenience.get_active_storms(client)
        assert [s.storm_name for s in storms] == ["Milton"]

    def test_get_active_storms_sync_with_client(self, client):
        storms = get_active_storms_sync(client)
        assert len(storms) == 1
        client.close.assert_not_called()

    def test_sync_creates_temporary_client(self, client):
        client.close = AsyncMock()
        with patch("geofeeds.hurricane.HurricaneClient", return_value=client):
            storms = get_active_storms_sync()
        assert len(storms) == 1
        client.close.assert_awaited_once()
