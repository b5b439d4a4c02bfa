"""
Active hurricane module: feature-service client, track processing and the
polling data manager.

The feature service exposes three feeds:
- Positions: historical, current and forecast points per storm
- Uncertainty cones: forecast envelope polygons (layer number varies)
- Secondary forecast: forecast points whose category field is populated

Processing turns raw positions into ProcessedStorm objects carrying
category-colored two-point track segments for rendering.
"""

from .client import HurricaneClient, parse_cone, parse_position
from .manager import HurricaneDataManager
from .models import (
    ClassifiedPositions,
    ColoredTrackSegment,
    HurricaneFeeds,
    HurricaneSnapshot,
    ProcessedStorm,
    RawPosition,
    RenderableCone,
    TrajectoryCone,
)
from .processor import (
    assemble_cones,
    build_secondary_segments,
    build_segments,
    build_track_paths,
    category_color,
    category_size,
    category_text,
    classify,
    group_by_storm,
    process_storms,
    resolve_category,
    wind_speed_to_category,
)

__all__ = [
    "HurricaneClient",
    "HurricaneDataManager",
    "parse_position",
    "parse_cone",
    "RawPosition",
    "TrajectoryCone",
    "RenderableCone",
    "ClassifiedPositions",
    "ColoredTrackSegment",
    "ProcessedStorm",
    "HurricaneFeeds",
    "HurricaneSnapshot",
    "group_by_storm",
    "classify",
    "resolve_category",
    "wind_speed_to_category",
    "category_color",
    "category_size",
    "category_text",
    "build_segments",
    "build_secondary_segments",
    "build_track_paths",
    "assemble_cones",
    "process_storms",
]
