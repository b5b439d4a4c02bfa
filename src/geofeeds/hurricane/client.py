"""
Client for the active-hurricane ArcGIS feature service.
"""

import asyncio
import logging
import math
from datetime import datetime, timezone
from typing import Any, Awaitable, Dict, List, Optional, Tuple, TypeVar

from ..base_client import BaseFeedClient
from ..config import ClientConfig, HurricaneConfig
from ..exceptions import FeedQueryError, GeoFeedsError
from .models import Coordinate, HurricaneFeeds, RawPosition, TrajectoryCone

logger = logging.getLogger(__name__)

T = TypeVar("T")

QUERY_PARAMS = {
    "where": "1=1",
    "outFields": "*",
    "returnGeometry": "true",
    "f": "json",
}


def _require_float(value: Any, name: str) -> float:
    if value is None or isinstance(value, bool):
        raise ValueError(f"missing {name}")
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"non-finite {name}: {value!r}")
    return number


def _optional_float(value: Any, default: Optional[float]) -> Optional[float]:
    if value is None or value == "":
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def _parse_dtg(value: Any) -> datetime:
    """Parse a DTG value (epoch milliseconds or ISO string) as a UTC datetime."""
    if value is None or value == "" or isinstance(value, bool):
        raise ValueError("missing DTG")

    if isinstance(value, str):
        text = value.strip()
        try:
            value = float(text)
        except ValueError:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
            return parsed

    try:
        return datetime.fromtimestamp(float(value) / 1000, tz=timezone.utc)
    except (OverflowError, OSError) as e:
        raise ValueError(f"DTG out of range: {value!r}") from e


def parse_position(feature: Any) -> RawPosition:
    """
    Build a RawPosition from an ArcGIS feature record.

    Raises:
        ValueError: If the storm id, coordinates or DTG are missing, or the
            coordinates fall outside [-180, 180] x [-90, 90]
        TypeError: If a field has an unusable type
    """
    if not isinstance(feature, dict):
        raise ValueError("feature is not an object")

    attributes = feature.get("attributes")
    geometry = feature.get("geometry")
    if not isinstance(attributes, dict):
        raise ValueError("missing attributes")
    if not isinstance(geometry, dict):
        raise ValueError("missing geometry")

    storm_id = str(attributes.get("STORMID") or "").strip()
    if not storm_id:
        raise ValueError("missing STORMID")

    x = geometry.get("x", geometry.get("longitude"))
    y = geometry.get("y", geometry.get("latitude"))
    longitude = _require_float(x, "longitude")
    latitude = _require_float(y, "latitude")
    if not (-180 <= longitude <= 180 and -90 <= latitude <= 90):
        raise ValueError(f"coordinates out of bounds: ({longitude}, {latitude})")

    forecast_hour = int(_optional_float(attributes.get("FCST_HR"), 0.0) or 0)
    if forecast_hour < 0:
        raise ValueError(f"negative forecast hour: {forecast_hour}")

    return RawPosition(
        storm_id=storm_id,
        storm_name=str(attributes.get("STORMNAME") or "").strip(),
        basin=str(attributes.get("BASIN") or "").strip(),
        longitude=longitude,
        latitude=latitude,
        category=_optional_float(attributes.get("SS"), 0.0) or 0.0,
        intensity=_optional_float(attributes.get("INTENSITY"), 0.0) or 0.0,
        pressure=_optional_float(attributes.get("MSLP"), None),
        forecast_hour=forecast_hour,
        timestamp=_parse_dtg(attributes.get("DTG")),
        storm_type=attributes.get("STORMTYPE"),
    )


def parse_cone(feature: Any) -> TrajectoryCone:
    """
    Build a TrajectoryCone from an ArcGIS polygon feature.

    Raises:
        ValueError: If the feature has no rings or a malformed ring point
    """
    if not isinstance(feature, dict):
        raise ValueError("feature is not an object")

    attributes = feature.get("attributes") or {}
    geometry = feature.get("geometry") or {}
    raw_rings = geometry.get("rings") if isinstance(geometry, dict) else None
    if not raw_rings:
        raise ValueError("missing rings")

    rings: List[Tuple[Coordinate, ...]] = []
    for ring in raw_rings:
        for point in ring:
            if not isinstance(point, (list, tuple)) or len(point) < 2:
                raise ValueError(f"malformed ring point: {point!r}")
        coords = tuple(
            (_require_float(point[0], "x"), _require_float(point[1], "y"))
            for point in ring
        )
        rings.append(coords)

    if not rings[0]:
        raise ValueError("empty outer ring")

    return TrajectoryCone(
        storm_id=str(attributes.get("STORMID") or "").strip(),
        storm_name=str(attributes.get("STORMNAME") or "").strip(),
        forecast_hour=int(_optional_float(attributes.get("FCST_HR"), 0.0) or 0),
        category=_optional_float(attributes.get("SS"), 0.0) or 0.0,
        basin=str(attributes.get("BASIN") or "").strip(),
        rings=tuple(rings),
    )


class HurricaneClient(BaseFeedClient):
    """
    Client for the active hurricane feature service.

    Public fetch methods never raise on feed failure: a failed or malformed
    response yields an empty list, and callers treat "empty" as a valid
    state since the feed is genuinely empty outside storm season.
    ``fetch_all`` additionally reports which feeds failed.
    """

    def __init__(
        self,
        config: Optional[HurricaneConfig] = None,
        client_config: Optional[ClientConfig] = None,
    ):
        super().__init__(client_config)
        self.config = config or HurricaneConfig()

    async def _query_layer(self, layer: int) -> List[Any]:
        """Query every feature of one service layer."""
        url = f"{self.config.service_url}/{layer}/query"
        data = await self._get_json(url, QUERY_PARAMS)

        if not isinstance(data, dict):
            raise FeedQueryError(f"Unexpected response type from layer {layer}")

        error = data.get("error")
        if error:
            message = error.get("message") if isinstance(error, dict) else error
            raise FeedQueryError(f"Feature service error on layer {layer}: {message}")

        features = data.get("features")
        if not isinstance(features, list):
            raise FeedQueryError(f"Layer {layer} response has no feature list")

        return features

    async def _load_positions(self, layer: int) -> List[RawPosition]:
        features = await self._query_layer(layer)

        positions = []
        for feature in features:
            try:
                positions.append(parse_position(feature))
            except (ValueError, TypeError) as e:
                # Skip invalid records but keep the rest of the feed
                logger.debug(f"Dropping position from layer {layer}: {e}")
                continue

        logger.debug(f"Layer {layer}: {len(positions)}/{len(features)} valid positions")
        return positions

    async def _capture(
        self, feed: str, loader: Awaitable[List[T]]
    ) -> Tuple[List[T], Optional[str]]:
        try:
            return await loader, None
        except GeoFeedsError as e:
            logger.warning(f"Hurricane {feed} feed unavailable: {e}")
            return [], str(e)

    async def fetch_positions(self) -> List[RawPosition]:
        """
        Fetch historical, current and forecast positions for all active storms.

        Returns:
            Validated positions; empty if the feed failed or has no storms
        """
        positions, _ = await self._capture(
            "positions", self._load_positions(self.config.positions_layer)
        )
        return positions

    async def fetch_secondary_forecast(self) -> List[RawPosition]:
        """
        Fetch the per-storm forecast feed whose category field is populated.

        Returns:
            Validated forecast positions; empty if unavailable
        """
        positions, _ = await self._capture(
            "secondary forecast",
            self._load_positions(self.config.secondary_forecast_layer),
        )
        return positions

    async def fetch_cones(self) -> List[TrajectoryCone]:
        """
        Fetch forecast uncertainty cones.

        Tries each candidate layer in ``config.cone_layers`` in order and
        returns the first non-empty, well-formed result.

        Returns:
            Cones from the first usable layer, or an empty list
        """
        for layer in self.config.cone_layers:
            try:
                features = await self._query_layer(layer)
            except GeoFeedsError as e:
                logger.debug(f"Cone layer {layer} unusable: {e}")
                continue

            cones = []
            for feature in features:
                try:
                    cones.append(parse_cone(feature))
                except (ValueError, TypeError, IndexError) as e:
                    logger.debug(f"Dropping cone from layer {layer}: {e}")
                    continue

            if cones:
                logger.debug(f"Using cone layer {layer} ({len(cones)} cones)")
                return cones

        logger.debug("No uncertainty cones found in any candidate layer")
        return []

    async def fetch_all(self) -> HurricaneFeeds:
        """
        Fetch positions, cones and the secondary forecast concurrently.

        Returns:
            HurricaneFeeds with per-feed failures recorded in ``errors``
        """
        (positions, positions_error), cones, (secondary, secondary_error) = (
            await asyncio.gather(
                self._capture(
                    "positions", self._load_positions(self.config.positions_layer)
                ),
                self.fetch_cones(),
                self._capture(
                    "secondary forecast",
                    self._load_positions(self.config.secondary_forecast_layer),
                ),
            )
        )

        errors: Dict[str, str] = {}
        if positions_error is not None:
            errors["positions"] = positions_error
        if secondary_error is not None:
            errors["secondary_forecast"] = secondary_error

        return HurricaneFeeds(
            positions=positions,
            cones=cones,
            secondary_forecast=secondary,
            errors=errors,
        )
