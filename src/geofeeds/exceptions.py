"""
Exceptions for geofeeds operations.
"""


class GeoFeedsError(Exception):
    """Base exception for geofeeds errors."""

    pass


class FeedConnectionError(GeoFeedsError):
    """Error reaching an upstream feed (timeout, network, rate limit, 5xx)."""

    pass


class FeedQueryError(GeoFeedsError):
    """Error in a feed query or in parsing its response."""

    pass
