"""
Data models for the ISS position and orbital trajectory.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

Coordinate = Tuple[float, float]


@dataclass(frozen=True)
class IssPosition:
    """Current ISS position as reported by the satellite API."""

    name: str
    id: int
    latitude: float
    longitude: float
    altitude: float  # km
    velocity: float  # km/h
    visibility: Optional[str]
    footprint: Optional[float]  # km
    timestamp: datetime

    @property
    def coordinates(self) -> Coordinate:
        return (self.longitude, self.latitude)


@dataclass(frozen=True)
class IssTrajectoryPoint:
    """Predicted ISS position at one timestamp."""

    latitude: float
    longitude: float
    altitude: float
    velocity: float
    timestamp: datetime

    @property
    def coordinates(self) -> Coordinate:
        return (self.longitude, self.latitude)


@dataclass(frozen=True)
class IssSnapshot:
    """ISS data for one update cycle; trajectory_segments never wrap the globe."""

    current_position: Optional[IssPosition] = None
    trajectory: Tuple[IssTrajectoryPoint, ...] = ()
    trajectory_segments: Tuple[Tuple[Coordinate, ...], ...] = ()
    last_update: Optional[datetime] = None
    error: Optional[str] = None
