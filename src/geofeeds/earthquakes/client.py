"""
Client for the USGS earthquake summary GeoJSON feed.
"""

import logging
from datetime import datetime, timezone
from typing import Any, List, Optional

from ..base_client import BaseFeedClient
from ..config import ClientConfig, EarthquakeConfig
from ..exceptions import FeedQueryError
from .models import Earthquake

logger = logging.getLogger(__name__)


def parse_earthquake(feature: Any) -> Earthquake:
    """
    Build an Earthquake from a GeoJSON feature.

    Raises:
        ValueError: If coordinates, a numeric magnitude, place or time are
            missing, or the coordinates or time are out of range
    """
    properties = feature.get("properties") or {}
    geometry = feature.get("geometry") or {}
    coordinates = geometry.get("coordinates") or []

    if len(coordinates) < 2:
        raise ValueError("missing coordinates")

    magnitude = properties.get("mag")
    if isinstance(magnitude, bool) or not isinstance(magnitude, (int, float)):
        raise ValueError(f"non-numeric magnitude: {magnitude!r}")
    if not properties.get("place"):
        raise ValueError("missing place")
    if not properties.get("time"):
        raise ValueError("missing time")

    longitude = float(coordinates[0])
    latitude = float(coordinates[1])
    if not (-180 <= longitude <= 180 and -90 <= latitude <= 90):
        raise ValueError(f"coordinates out of bounds: ({longitude}, {latitude})")

    try:
        time = datetime.fromtimestamp(properties["time"] / 1000, tz=timezone.utc)
    except (OverflowError, OSError) as e:
        raise ValueError(f"time out of range: {properties['time']!r}") from e

    depth = coordinates[2] if len(coordinates) > 2 else None

    return Earthquake(
        id=str(feature.get("id") or properties.get("code") or ""),
        magnitude=float(magnitude),
        place=str(properties["place"]),
        time=time,
        longitude=longitude,
        latitude=latitude,
        depth_km=float(depth) if depth is not None else None,
        url=properties.get("url"),
        tsunami=bool(properties.get("tsunami")),
        significance=int(properties.get("sig") or 0),
        alert=properties.get("alert"),
        title=properties.get("title"),
    )


class EarthquakeClient(BaseFeedClient):
    """Client for recent earthquakes from the USGS summary feed."""

    def __init__(
        self,
        config: Optional[EarthquakeConfig] = None,
        client_config: Optional[ClientConfig] = None,
    ):
        super().__init__(client_config)
        self.config = config or EarthquakeConfig()

    async def fetch_earthquakes(self) -> List[Earthquake]:
        """
        Fetch, validate and limit recent earthquakes.

        Events below ``config.min_magnitude`` or missing required fields are
        dropped; at most ``config.max_earthquakes`` are returned in feed
        order (USGS orders newest first).

        Raises:
            FeedConnectionError: If the feed cannot be reached
            FeedQueryError: If the response is not a FeatureCollection
        """
        data = await self._get_json(self.config.url)

        features = data.get("features") if isinstance(data, dict) else None
        if not isinstance(features, list):
            raise FeedQueryError("Invalid USGS response format")

        earthquakes = []
        for feature in features:
            try:
                quake = parse_earthquake(feature)
            except (AttributeError, TypeError, ValueError) as e:
                logger.debug(f"Dropping earthquake feature: {e}")
                continue
            if quake.magnitude < self.config.min_magnitude:
                continue
            earthquakes.append(quake)

        return earthquakes[: self.config.max_earthquakes]
