"""
High-level convenience functions for one-shot feed access.

Each function accepts an optional client. When none is given a temporary
client is created and closed before returning. Every function also has a
``.sync`` attribute for blocking use.
"""

from typing import List, Optional

from .earthquakes import Earthquake, EarthquakeClient
from .hurricane import (
    HurricaneClient,
    HurricaneDataManager,
    HurricaneSnapshot,
    ProcessedStorm,
    process_storms,
)
from .iss import IssClient, IssDataManager, IssSnapshot
from .utils import add_sync_version


@add_sync_version
async def get_active_storms(
    client: Optional[HurricaneClient] = None,
) -> List[ProcessedStorm]:
    """
    Fetch and process every active storm.

    Args:
        client: Hurricane client. If not provided, creates a temporary client

    Returns:
        Processed storms; empty outside storm season or if the feed failed

    Examples:
        >>> storms = await get_active_storms()
        >>> [s.storm_name for s in storms]
        ['Milton', 'Leslie']
    """
    if client is None:
        async with HurricaneClient() as temp_client:
            return await get_active_storms(temp_client)

    positions = await client.fetch_positions()
    return process_storms(positions, client.config)


@add_sync_version
async def get_hurricane_snapshot(
    client: Optional[HurricaneClient] = None,
) -> HurricaneSnapshot:
    """
    Run a single hurricane update cycle and return the resulting snapshot.

    A failed positions feed is reported in ``snapshot.error`` rather than
    raised.
    """
    if client is None:
        async with HurricaneClient() as temp_client:
            return await get_hurricane_snapshot(temp_client)

    manager = HurricaneDataManager(client)
    await manager.refresh()
    return manager.get_data()


@add_sync_version
async def get_iss_track(client: Optional[IssClient] = None) -> IssSnapshot:
    """Current ISS position plus its predicted trajectory, split at the antimeridian."""
    if client is None:
        async with IssClient() as temp_client:
            return await get_iss_track(temp_client)

    manager = IssDataManager(client)
    await manager.refresh()
    return manager.get_data()


@add_sync_version
async def get_recent_earthquakes(
    client: Optional[EarthquakeClient] = None,
) -> List[Earthquake]:
    """
    Fetch recent earthquakes, filtered and limited per the client's config.

    Raises:
        FeedConnectionError: If the feed cannot be reached
        FeedQueryError: If the response is malformed
    """
    if client is None:
        async with EarthquakeClient() as temp_client:
            return await get_recent_earthquakes(temp_client)

    return await client.fetch_earthquakes()
