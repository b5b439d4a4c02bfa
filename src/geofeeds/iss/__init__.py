"""
ISS tracking via the wheretheiss.at API: current position plus a predicted
trajectory split at the antimeridian.
"""

from .client import (
    IssClient,
    parse_iss_position,
    parse_trajectory_point,
    trajectory_timestamps,
)
from .manager import IssDataManager
from .models import IssPosition, IssSnapshot, IssTrajectoryPoint

__all__ = [
    "IssClient",
    "IssDataManager",
    "IssPosition",
    "IssSnapshot",
    "IssTrajectoryPoint",
    "parse_iss_position",
    "parse_trajectory_point",
    "trajectory_timestamps",
]
