from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .click import ClickEvent


class UrlRecord(BaseModel):
    """
    A shortened URL.
    
    Created once at shorten time and never modified afterwards; it leaves the
    registry only through the expiration sweep.
    """
    
    shortcode: str = Field(..., description="Case-sensitive unique code")
    original_url: str = Field(..., description="Absolute http(s) destination")
    created_at: datetime
    expires_at: datetime
    
    # Provenance
    created_by: Optional[str] = Field(None, description="Creator IP address")
    creator_user_agent: Optional[str] = None
    
    model_config = ConfigDict(frozen=True)


class UrlSummary(BaseModel):
    """Listing entry for a single record"""
    
    shortcode: str
    original_url: str
    created_at: datetime
    expires_at: datetime
    total_clicks: int = 0
    
    model_config = ConfigDict(frozen=True, from_attributes=True)


class StatsView(BaseModel):
    """Record fields plus accumulated clicks, flagged when expired"""
    
    shortcode: str
    original_url: str
    created_at: datetime
    expires_at: datetime
    created_by: Optional[str] = None
    creator_user_agent: Optional[str] = None
    total_clicks: int
    is_expired: bool
    clicks: List[ClickEvent] = []
    
    model_config = ConfigDict(frozen=True)


class ShortenResult(BaseModel):
    """Outcome of a successful shorten call"""
    
    shortcode: str
    short_link: str
    expiry: datetime
    
    model_config = ConfigDict(frozen=True)
