"""
Domain models for the short link registry.

Records and click events are immutable once created; the registry only ever
inserts or deletes them, so readers never observe a half-built object.
"""

from .click import ClickEvent, Location, UNKNOWN_LOCATION
from .url import UrlRecord, UrlSummary, StatsView, ShortenResult

__all__ = [
    "ClickEvent",
    "Location",
    "UNKNOWN_LOCATION",
    "UrlRecord",
    "UrlSummary",
    "StatsView",
    "ShortenResult",
]
