"""
Synchronous wrapper functions for geofeeds.

For scripts and notebooks that cannot use async/await. Each wrapper runs the
matching coroutine from ``geofeeds.convenience`` in a fresh event loop and,
when no client is given, creates and closes a temporary one.

Usage:
    # Instead of this async code:
    async with HurricaneClient() as client:
        storms = await get_active_storms(client)

    # Use this sync code:
    from geofeeds.sync import get_active_storms_sync
    storms = get_active_storms_sync()
"""

import asyncio
import inspect
from typing import (
    TYPE_CHECKING,
    Any,
    Awaitable,
    Callable,
    List,
    Optional,
    TypeVar,
    Union,
    get_args,
    get_origin,
)

if TYPE_CHECKING:
    from .earthquakes import Earthquake, EarthquakeClient
    from .hurricane import HurricaneClient, HurricaneSnapshot, ProcessedStorm
    from .iss import IssClient, IssSnapshot

R = TypeVar("R")


class AsyncSyncBridge:
    """Runs async functions synchronously and manages temporary clients."""

    @staticmethod
    def run_async(
        async_fn: Callable[..., Awaitable[R]],
        args: tuple = (),
        kwargs: Optional[dict] = None,
        client_class: Optional[type] = None,
    ) -> R:
        """Run an async function synchronously.

        Args:
            async_fn: Async function to run
            args: Positional arguments for the function
            kwargs: Keyword arguments for the function
            client_class: Client class to instantiate if no client is passed

        Returns:
            Result of running the async function

        Raises:
            RuntimeError: If called from within a running event loop
        """
        kwargs = dict(kwargs or {})

        try:
            asyncio.get_running_loop()
        except RuntimeError:
            pass
        else:
            raise RuntimeError(
                "Cannot use sync version from within an existing asyncio event loop. "
                "Use the async version instead."
            )

        temp_client = None
        if client_class is not None and kwargs.get("client") is None:
            if "client" in inspect.signature(async_fn).parameters:
                temp_client = client_class()
                kwargs["client"] = temp_client

        async def _call_and_cleanup() -> R:
            try:
                return await async_fn(*args, **kwargs)
            finally:
                if temp_client is not None:
                    await temp_client.close()

        return asyncio.run(_call_and_cleanup())

    @staticmethod
    def extract_client_class(annotation: Any) -> Optional[type]:
        """Extract the client class from an ``Optional[Client]`` or ``Client`` annotation."""
        if annotation is None or annotation is inspect.Parameter.empty:
            return None

        if get_origin(annotation) is Union:
            non_none_args = [arg for arg in get_args(annotation) if arg is not type(None)]
            if non_none_args and isinstance(non_none_args[0], type):
                return non_none_args[0]
            return None

        if isinstance(annotation, type):
            return annotation

        return None


def get_active_storms_sync(
    client: Optional["HurricaneClient"] = None,
) -> List["ProcessedStorm"]:
    """Synchronous version of get_active_storms.

    Examples:
        >>> for storm in get_active_storms_sync():
        ...     print(storm.storm_name, storm.current_category)
    """
    from .convenience import get_active_storms
    from .hurricane import HurricaneClient

    return AsyncSyncBridge.run_async(
        get_active_storms,
        kwargs={"client": client},
        client_class=HurricaneClient if client is None else None,
    )


def get_hurricane_snapshot_sync(
    client: Optional["HurricaneClient"] = None,
) -> "HurricaneSnapshot":
    """Synchronous version of get_hurricane_snapshot.

    Examples:
        >>> df = get_hurricane_snapshot_sync().to_pandas()
    """
    from .convenience import get_hurricane_snapshot
    from .hurricane import HurricaneClient

    return AsyncSyncBridge.run_async(
        get_hurricane_snapshot,
        kwargs={"client": client},
        client_class=HurricaneClient if client is None else None,
    )


def get_iss_track_sync(client: Optional["IssClient"] = None) -> "IssSnapshot":
    """Synchronous version of get_iss_track."""
    from .convenience import get_iss_track
    from .iss import IssClient

    return AsyncSyncBridge.run_async(
        get_iss_track,
        kwargs={"client": client},
        client_class=IssClient if client is None else None,
    )


def get_recent_earthquakes_sync(
    client: Optional["EarthquakeClient"] = None,
) -> List["Earthquake"]:
    """Synchronous version of get_recent_earthquakes."""
    from .convenience import get_recent_earthquakes
    from .earthquakes import EarthquakeClient

    return AsyncSyncBridge.run_async(
        get_recent_earthquakes,
        kwargs={"client": client},
        client_class=EarthquakeClient if client is None else None,
    )
