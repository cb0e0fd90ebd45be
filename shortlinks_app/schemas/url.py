from datetime import datetime, timezone
from typing import Any, Generic, List, Optional, Tuple, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from shortlinks_app.models import ClickEvent, StatsView, UrlSummary

T = TypeVar("T")


class CamelModel(BaseModel):
    """Response base serialising field names in camelCase"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ShortenRequest(BaseModel):
    """Create request.

    Fields are loosely typed on purpose: the service validates them and
    answers with its own error kinds instead of a 422.
    """

    url: Any = Field(None, description="The original URL to be shortened")
    validity: Any = Field(None, description="Validity in minutes (default 30)")
    shortcode: Optional[Any] = Field(None, description="Desired custom shortcode")


class ShortenResponse(CamelModel):
    shortcode: str
    short_link: str
    expiry: datetime


class UrlSummaryResponse(CamelModel):
    shortcode: str
    original_url: str
    created_at: datetime
    expires_at: datetime
    total_clicks: int
    short_link: str

    @classmethod
    def from_summary(cls, summary: UrlSummary, short_link: str) -> "UrlSummaryResponse":
        return cls(**summary.model_dump(), short_link=short_link)


class ClickSource(CamelModel):
    referrer: str
    user_agent: Optional[str] = None
    browser: str
    os: str


class ClickLocation(CamelModel):
    country: str
    region: str
    city: str
    coordinates: Optional[Tuple[float, float]] = None


class ClickResponse(CamelModel):
    timestamp: datetime
    source: ClickSource
    location: ClickLocation

    @classmethod
    def from_event(cls, event: ClickEvent) -> "ClickResponse":
        """Clicks without a referrer are reported as direct traffic"""
        return cls(
            timestamp=event.timestamp,
            source=ClickSource(
                referrer=event.referrer or "Direct",
                user_agent=event.user_agent,
                browser=event.browser,
                os=event.os,
            ),
            location=ClickLocation(**event.location.model_dump()),
        )


class StatsResponse(CamelModel):
    shortcode: str
    original_url: str
    created_at: datetime
    expires_at: datetime
    total_clicks: int
    is_expired: bool
    clicks: List[ClickResponse]

    @classmethod
    def from_view(cls, view: StatsView) -> "StatsResponse":
        return cls(
            shortcode=view.shortcode,
            original_url=view.original_url,
            created_at=view.created_at,
            expires_at=view.expires_at,
            total_clicks=view.total_clicks,
            is_expired=view.is_expired,
            clicks=[ClickResponse.from_event(click) for click in view.clicks],
        )


class SweepResponse(BaseModel):
    removed: int


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Envelope(BaseModel, Generic[T]):
    """Success wrapper used by the listing endpoint"""

    error: bool = False
    message: str = "Success"
    timestamp: datetime = Field(default_factory=_utcnow)
    data: T


class ErrorResponse(BaseModel):
    error: bool = True
    message: str
    kind: str
    timestamp: datetime = Field(default_factory=_utcnow)
