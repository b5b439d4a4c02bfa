"""
Shared fixtures for geofeeds tests.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from geofeeds.hurricane.models import RawPosition

BASE_TIME = datetime(2024, 10, 8, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_position():
    """Factory for RawPosition records with sensible defaults."""

    def _make(
        storm_id="AL142024",
        hours=0,
        forecast_hour=0,
        category=0.0,
        intensity=0.0,
        longitude=-85.0,
        latitude=22.0,
        storm_name="Milton",
        basin="AL",
    ):
        return RawPosition(
            storm_id=storm_id,
            storm_name=storm_name,
            basin=basin,
            longitude=longitude,
            latitude=latitude,
            category=category,
            intensity=intensity,
            pressure=950.0,
            forecast_hour=forecast_hour,
            timestamp=BASE_TIME + timedelta(hours=hours),
        )

    return _make


@pytest.fixture
def mock_http():
    """Build an AsyncMock standing in for httpx.AsyncClient.

    Call with a JSON body (or a list of bodies for successive calls).
    """

    def _response(data):
        response = Mock()
        response.json.return_value = data
        response.raise_for_status.return_value = None
        return response

    def _make(data=None, side_effect=None):
        mock_client = AsyncMock()
        if side_effect is not None:
            mock_client.get.side_effect = side_effect
        elif isinstance(data, tuple):
            mock_client.get.side_effect = [_response(d) for d in data]
        else:
            mock_client.get.return_value = _response(data)
        return mock_client

    return _make


@pytest.fixture
def http_status_error():
    """Build an httpx.HTTPStatusError for a given status code."""

    def _make(status_code, url="https://example.test/feed"):
        request = httpx.Request("GET", url)
        response = httpx.Response(status_code, request=request)
        return httpx.HTTPStatusError(
            f"HTTP {status_code}", request=request, response=response
        )

    return _make
