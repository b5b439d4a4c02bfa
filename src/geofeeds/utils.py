"""
Internal utility functions for geofeeds.
"""

import inspect
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

R = TypeVar("R")


def _temporary_client_class(
    signature: inspect.Signature, kwargs: Dict[str, Any]
) -> Optional[type]:
    """Client class to create for a call, or None when the caller supplied one."""
    from .sync import AsyncSyncBridge

    client_param = signature.parameters.get("client")
    if client_param is None or kwargs.get("client") is not None:
        return None
    return AsyncSyncBridge.extract_client_class(client_param.annotation)


def add_sync_version(
    async_fn: Callable[..., Awaitable[R]],
) -> Callable[..., Awaitable[R]]:
    """
    Attach a blocking ``.sync`` variant to a feed coroutine.

    The convenience functions take an optional ``client: Optional[XClient]``.
    Called through ``.sync`` without a client, the annotated feed client
    (HurricaneClient, IssClient or EarthquakeClient) is created for that one
    call and its HTTP connection pool is closed before returning. An explicit
    ``client=None`` is treated the same as omitting it.

    Example:
        >>> storms = get_active_storms.sync()
        >>> snapshot = get_hurricane_snapshot.sync(client=my_client)
    """
    signature = inspect.signature(async_fn)

    def sync_wrapper(*args: Any, **kwargs: Any) -> R:
        from .sync import AsyncSyncBridge

        client_class = _temporary_client_class(signature, kwargs)
        if client_class is not None:
            kwargs.pop("client", None)

        return AsyncSyncBridge.run_async(
            async_fn, args=args, kwargs=kwargs, client_class=client_class
        )

    async_fn.sync = sync_wrapper  # type: ignore
    return async_fn
