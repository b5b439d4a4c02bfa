"""
Client for the wheretheiss.at satellite position API.
"""

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..base_client import BaseFeedClient
from ..config import ClientConfig, IssConfig
from ..exceptions import FeedQueryError
from .models import IssPosition, IssTrajectoryPoint

logger = logging.getLogger(__name__)


def trajectory_timestamps(
    start: int, duration_minutes: int, interval_seconds: int
) -> List[int]:
    """Unix timestamps from ``start`` to ``start + duration`` inclusive, every interval."""
    if interval_seconds <= 0:
        raise ValueError("interval_seconds must be positive")
    end = start + duration_minutes * 60
    return list(range(start, end + 1, interval_seconds))


def _to_datetime(value: Any) -> datetime:
    return datetime.fromtimestamp(float(value), tz=timezone.utc)


def parse_iss_position(data: Dict[str, Any]) -> IssPosition:
    """Build an IssPosition from the satellite endpoint body."""
    footprint = data.get("footprint")
    return IssPosition(
        name=str(data.get("name", "iss")),
        id=int(data.get("id", 0)),
        latitude=float(data["latitude"]),
        longitude=float(data["longitude"]),
        altitude=float(data.get("altitude", 0)),
        velocity=float(data.get("velocity", 0)),
        visibility=data.get("visibility"),
        footprint=float(footprint) if footprint is not None else None,
        timestamp=_to_datetime(data["timestamp"]),
    )


def parse_trajectory_point(data: Dict[str, Any]) -> IssTrajectoryPoint:
    """Build an IssTrajectoryPoint from one entry of the positions endpoint."""
    return IssTrajectoryPoint(
        latitude=float(data["latitude"]),
        longitude=float(data["longitude"]),
        altitude=float(data.get("altitude", 0)),
        velocity=float(data.get("velocity", 0)),
        timestamp=_to_datetime(data["timestamp"]),
    )


class IssClient(BaseFeedClient):
    """
    Client for the ISS current position and its predicted trajectory.

    Unlike the hurricane client, failures raise FeedConnectionError or
    FeedQueryError; the ISS manager turns them into snapshot errors.
    """

    def __init__(
        self,
        config: Optional[IssConfig] = None,
        client_config: Optional[ClientConfig] = None,
    ):
        super().__init__(client_config)
        self.config = config or IssConfig()

    @property
    def satellite_url(self) -> str:
        return f"{self.config.api_base_url}/{self.config.satellite_id}"

    async def fetch_position(self) -> IssPosition:
        """Fetch the current ISS position."""
        data = await self._get_json(self.satellite_url)
        try:
            return parse_iss_position(data)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise FeedQueryError(f"Malformed ISS position response: {e}") from e

    async def _fetch_batch(self, timestamps: List[int]) -> List[IssTrajectoryPoint]:
        data = await self._get_json(
            f"{self.satellite_url}/positions",
            {"timestamps": ",".join(str(t) for t in timestamps)},
        )
        if not isinstance(data, list):
            raise FeedQueryError("ISS trajectory response is not a list")

        points = []
        for item in data:
            try:
                points.append(parse_trajectory_point(item))
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                logger.debug(f"Dropping trajectory point: {e}")
                continue
        return points

    async def fetch_trajectory(self, start: Optional[int] = None) -> List[IssTrajectoryPoint]:
        """
        Fetch predicted positions from ``start`` (default: now) forward.

        The positions endpoint limits how many timestamps one request may
        carry, so timestamps are split into batches fetched concurrently.

        Args:
            start: Unix timestamp of the first point

        Returns:
            Trajectory points in chronological order
        """
        if start is None:
            start = int(time.time())

        timestamps = trajectory_timestamps(
            start,
            self.config.trajectory_duration_minutes,
            self.config.trajectory_point_interval_seconds,
        )
        size = self.config.max_timestamps_per_request
        batches = [timestamps[i : i + size] for i in range(0, len(timestamps), size)]

        logger.debug(
            f"Requesting ISS trajectory: {len(timestamps)} points in {len(batches)} batches"
        )
        results = await asyncio.gather(*(self._fetch_batch(b) for b in batches))

        points = [point for batch in results for point in batch]
        points.sort(key=lambda p: p.timestamp)
        return points
