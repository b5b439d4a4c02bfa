"""
Tests for the hurricane feature-service client.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from geofeeds.config import ClientConfig, HurricaneConfig
from geofeeds.exceptions import FeedConnectionError, FeedQueryError
from geofeeds.hurricane.client import HurricaneClient, parse_cone, parse_position

DTG_MS = 1728388800000  # 2024-10-08T12:00:00Z


def position_feature(**overrides):
    attributes = {
        "STORMID": "AL142024",
        "STORMNAME": "Milton",
        "BASIN": "AL",
        "SS": 5,
        "INTENSITY": 150,
        "MSLP": 905,
        "FCST_HR": 0,
        "DTG": DTG_MS,
        "STORMTYPE": "HU",
    }
    attributes.update(overrides)
    return {"attributes": attributes, "geometry": {"x": -88.0, "y": 22.5}}


def cone_feature(storm_id="AL142024"):
    return {
        "attributes": {"STORMID": storm_id, "STORMNAME": "Milton", "FCST_HR": 120},
        "geometry": {"rings": [[[-88.0, 22.0], [-80.0, 25.0], [-85.0, 30.0], [-88.0, 22.0]]]},
    }


def _response(data):
    response = Mock()
    response.json.return_value = data
    response.raise_for_status.return_value = None
    return response


def route(responses):
    """side_effect dispatching on the layer number in the query URL."""

    async def _get(url, params=None):
        layer = int(url.rstrip("/").split("/")[-2])
        result = responses.get(layer, {"features": []})
        if isinstance(result, Exception):
            raise result
        return _response(result)

    return _get


class TestParsePosition:
    """Test validation at the parse boundary."""

    def test_valid_feature(self):
        position = parse_position(position_feature())
        assert position.storm_id == "AL142024"
        assert position.coordinates == (-88.0, 22.5)
        assert position.category == 5
        assert position.intensity == 150
        assert position.pressure == 905
        assert position.forecast_hour == 0
        assert position.timestamp == datetime(2024, 10, 8, 12, 0, tzinfo=timezone.utc)
        assert position.storm_type == "HU"

    def test_numeric_string_dtg(self):
        position = parse_position(position_feature(DTG=str(DTG_MS)))
        assert position.timestamp.year == 2024

    def test_longitude_latitude_geometry(self):
        feature = position_feature()
        feature["geometry"] = {"longitude": 140.0, "latitude": 15.0}
        assert parse_position(feature).coordinates == (140.0, 15.0)

    def test_missing_optional_fields_default(self):
        position = parse_position(position_feature(SS=None, INTENSITY=None, MSLP=None))
        assert position.category == 0
        assert position.intensity == 0
        assert position.pressure is None

    @pytest.mark.parametrize(
        "overrides",
        [{"STORMID": ""}, {"STORMID": None}, {"DTG": None}, {"DTG": "not a date"}, {"FCST_HR": -6}],
    )
    def test_invalid_attributes_rejected(self, overrides):
        with pytest.raises((ValueError, TypeError)):
            parse_position(position_feature(**overrides))

    @pytest.mark.parametrize(
        "geometry",
        [{}, {"x": None, "y": 10.0}, {"x": "abc", "y": 10.0}, {"x": 190.0, "y": 10.0}, {"x": 0.0, "y": -91.0}],
    )
    def test_invalid_geometry_rejected(self, geometry):
        feature = position_feature()
        feature["geometry"] = geometry
        with pytest.raises((ValueError, TypeError)):
            parse_position(feature)

    def test_missing_geometry_rejected(self):
        with pytest.raises(ValueError):
            parse_position({"attributes": position_feature()["attributes"]})

    def test_out_of_range_dtg_rejected(self):
        with pytest.raises(ValueError, match="DTG out of range"):
            parse_position(position_feature(DTG=1e20))


class TestParseCone:
    def test_valid_cone(self):
        cone = parse_cone(cone_feature())
        assert cone.storm_id == "AL142024"
        assert cone.forecast_hour == 120
        assert cone.rings[0][0] == (-88.0, 22.0)

    def test_missing_rings_rejected(self):
        with pytest.raises(ValueError):
            parse_cone({"attributes": {}, "geometry": {}})

    def test_empty_outer_ring_rejected(self):
        with pytest.raises(ValueError):
            parse_cone({"attributes": {}, "geometry": {"rings": [[]]}})

    def test_mapping_ring_point_rejected(self):
        with pytest.raises(ValueError, match="malformed ring point"):
            parse_cone({"attributes": {}, "geometry": {"rings": [[{"x": 1, "y": 2}]]}})


class TestHurricaneClient:
    """Test HurricaneClient fetch behavior."""

    @pytest.fixture
    def client(self):
        return HurricaneClient(client_config=ClientConfig(timeout=5))

    def test_init(self, client):
        assert client.timeout == 5
        assert client.config.positions_layer == 1
        assert client.config.cone_layers == (4, 5, 6)

    @pytest.mark.asyncio
    async def test_fetch_positions_drops_invalid(self, client, mock_http):
        client._client = mock_http(
            {"features": [position_feature(), position_feature(STORMID=""), {"bad": 1}]}
        )

        positions = await client.fetch_positions()

        assert len(positions) == 1
        url = client._client.get.call_args.args[0]
        assert url.endswith("/1/query")
        assert client._client.get.call_args.kwargs["params"]["where"] == "1=1"

    @pytest.mark.asyncio
    async def test_fetch_positions_drops_out_of_range_dtg(self, client, mock_http):
        client._client = mock_http(
            {"features": [position_feature(), position_feature(DTG=1e20)]}
        )
        assert len(await client.fetch_positions()) == 1

    @pytest.mark.asyncio
    async def test_fetch_positions_http_error_is_empty(self, client, http_status_error):
        client._client = AsyncMock()
        client._client.get.side_effect = http_status_error(503)
        assert await client.fetch_positions() == []

    @pytest.mark.asyncio
    async def test_fetch_positions_service_error_body_is_empty(self, client, mock_http):
        client._client = mock_http({"error": {"code": 400, "message": "Invalid query"}})
        assert await client.fetch_positions() == []

    @pytest.mark.asyncio
    async def test_fetch_positions_timeout_is_empty(self, client):
        client._client = AsyncMock()
        client._client.get.side_effect = httpx.ReadTimeout("timed out")
        assert await client.fetch_positions() == []

    @pytest.mark.asyncio
    async def test_fetch_secondary_forecast_uses_layer_0(self, client, mock_http):
        client._client = mock_http(
            {"features": [position_feature(FCST_HR=12, SS=3)]}
        )
        positions = await client.fetch_secondary_forecast()
        assert len(positions) == 1
        assert client._client.get.call_args.args[0].endswith("/0/query")

    @pytest.mark.asyncio
    async def test_fetch_cones_falls_back_in_order(self, client, http_status_error):
        client._client = AsyncMock()
        client._client.get.side_effect = route(
            {4: http_status_error(400), 5: {"features": []}, 6: {"features": [cone_feature()]}}
        )

        cones = await client.fetch_cones()

        assert len(cones) == 1
        called = [call.args[0] for call in client._client.get.call_args_list]
        assert [url.split("/")[-2] for url in called] == ["4", "5", "6"]

    @pytest.mark.asyncio
    async def test_fetch_cones_stops_at_first_usable_layer(self, client):
        client._client = AsyncMock()
        client._client.get.side_effect = route({4: {"features": [cone_feature()]}})

        cones = await client.fetch_cones()

        assert len(cones) == 1
        assert client._client.get.call_count == 1

    @pytest.mark.asyncio
    async def test_fetch_cones_drops_malformed_cone(self, client):
        bad_cone = {
            "attributes": {"STORMID": "AL152024", "FCST_HR": 72},
            "geometry": {"rings": [[{"x": 1, "y": 2}]]},
        }
        client._client = AsyncMock()
        client._client.get.side_effect = route({4: {"features": [bad_cone, cone_feature()]}})

        cones = await client.fetch_cones()

        assert [c.storm_id for c in cones] == ["AL142024"]

    @pytest.mark.asyncio
    async def test_fetch_cones_all_empty(self, client):
        client._client = AsyncMock()
        client._client.get.side_effect = route({})
        assert await client.fetch_cones() == []

    @pytest.mark.asyncio
    async def test_fetch_all_success(self, client):
        client._client = AsyncMock()
        client._client.get.side_effect = route(
            {
                0: {"features": [position_feature(FCST_HR=12)]},
                1: {"features": [position_feature(), position_feature(FCST_HR=12)]},
                4: {"features": [cone_feature()]},
            }
        )

        feeds = await client.fetch_all()

        assert len(feeds.positions) == 2
        assert len(feeds.secondary_forecast) == 1
        assert len(feeds.cones) == 1
        assert feeds.errors == {}

    @pytest.mark.asyncio
    async def test_fetch_all_records_feed_errors(self, client, http_status_error):
        client._client = AsyncMock()
        client._client.get.side_effect = route(
            {
                0: http_status_error(404),
                1: httpx.ConnectError("connection refused"),
                4: {"features": [cone_feature()]},
            }
        )

        feeds = await client.fetch_all()

        assert feeds.positions == []
        assert feeds.secondary_forecast == []
        assert len(feeds.cones) == 1
        assert set(feeds.errors) == {"positions", "secondary_forecast"}
        assert "Network error" in feeds.errors["positions"]

    @pytest.mark.asyncio
    async def test_context_manager_closes(self):
        async with HurricaneClient(HurricaneConfig()) as client:
            client._client = AsyncMock()
        client._client.aclose.assert_awaited_once()


class TestErrorMapping:
    """Test HTTP failure mapping in the shared base client."""

    @pytest.fixture
    def client(self):
        return HurricaneClient()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status,expected",
        [(404, FeedQueryError), (400, FeedQueryError), (429, FeedConnectionError), (502, FeedConnectionError)],
    )
    async def test_status_codes(self, client, http_status_error, status, expected):
        client._client = AsyncMock()
        client._client.get.side_effect = http_status_error(status)
        with pytest.raises(expected):
            await client._query_layer(1)

    @pytest.mark.asyncio
    async def test_invalid_json(self, client):
        response = Mock()
        response.raise_for_status.return_value = None
        response.json.side_effect = ValueError("Expecting value")
        client._client = AsyncMock()
        client._client.get.return_value = response
        with pytest.raises(FeedQueryError):
            await client._query_layer(1)

    @pytest.mark.asyncio
    async def test_missing_feature_list(self, client, mock_http):
        client._client = mock_http({"fields": []})
        with pytest.raises(FeedQueryError):
            await client._query_layer(1)
