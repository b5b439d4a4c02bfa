"""
Live geospatial feeds for a world-map dashboard.

Fetch active hurricanes, the ISS and recent earthquakes, process them into
render-ready snapshots and build ordered map layer descriptors.
"""

try:
    from importlib import metadata

    __version__ = metadata.version(__name__)
except Exception:
    __version__ = "unknown"

from .base_client import BaseFeedClient
from .config import ClientConfig, EarthquakeConfig, HurricaneConfig, IssConfig
from .convenience import (
    get_active_storms,
    get_hurricane_snapshot,
    get_iss_track,
    get_recent_earthquakes,
)
from .earthquakes import (
    Earthquake,
    EarthquakeClient,
    EarthquakeDataManager,
    EarthquakeSnapshot,
)
from .exceptions import FeedConnectionError, FeedQueryError, GeoFeedsError
from .hurricane import (
    ColoredTrackSegment,
    HurricaneClient,
    HurricaneDataManager,
    HurricaneSnapshot,
    ProcessedStorm,
    RawPosition,
    RenderableCone,
    TrajectoryCone,
    process_storms,
    resolve_category,
)
from .iss import IssClient, IssDataManager, IssPosition, IssSnapshot
from .layers import (
    LayerDescriptor,
    assemble_layers,
    create_earthquake_layers,
    create_hurricane_layers,
    create_iss_layers,
)
from .manager import PollingManager, SnapshotStore
from .paths import split_on_dateline, unwrap_segment
from .sync import (
    AsyncSyncBridge,
    get_active_storms_sync,
    get_hurricane_snapshot_sync,
    get_iss_track_sync,
    get_recent_earthquakes_sync,
)

__all__ = [
    # Clients and configuration
    "BaseFeedClient",
    "ClientConfig",
    "HurricaneConfig",
    "IssConfig",
    "EarthquakeConfig",
    "HurricaneClient",
    "IssClient",
    "EarthquakeClient",
    # Update orchestration
    "PollingManager",
    "SnapshotStore",
    "HurricaneDataManager",
    "IssDataManager",
    "EarthquakeDataManager",
    # Models
    "RawPosition",
    "TrajectoryCone",
    "RenderableCone",
    "ColoredTrackSegment",
    "ProcessedStorm",
    "HurricaneSnapshot",
    "IssPosition",
    "IssSnapshot",
    "Earthquake",
    "EarthquakeSnapshot",
    # Processing and geometry
    "process_storms",
    "resolve_category",
    "split_on_dateline",
    "unwrap_segment",
    # Layers
    "LayerDescriptor",
    "assemble_layers",
    "create_hurricane_layers",
    "create_iss_layers",
    "create_earthquake_layers",
    # Convenience functions
    "get_active_storms",
    "get_hurricane_snapshot",
    "get_iss_track",
    "get_recent_earthquakes",
    # Sync API
    "AsyncSyncBridge",
    "get_active_storms_sync",
    "get_hurricane_snapshot_sync",
    "get_iss_track_sync",
    "get_recent_earthquakes_sync",
    # Exceptions
    "GeoFeedsError",
    "FeedConnectionError",
    "FeedQueryError",
]
