from datetime import datetime
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

UNKNOWN = "Unknown"


class Location(BaseModel):
    """Geographical location resolved from a client IP"""
    
    country: str = UNKNOWN
    region: str = UNKNOWN
    city: str = UNKNOWN
    coordinates: Optional[Tuple[float, float]] = Field(
        None, description="(latitude, longitude) when the resolver knows it"
    )
    
    model_config = ConfigDict(frozen=True)


UNKNOWN_LOCATION = Location()


class ClickEvent(BaseModel):
    """
    A single successful redirect.
    
    Raw request provenance is kept alongside the values derived from it
    (browser/os from the user agent, location from the IP).
    """
    
    id: str = Field(..., description="Unique event identifier")
    timestamp: datetime = Field(..., description="When the redirect happened")
    
    # Request metadata
    source_ip: Optional[str] = Field(None, description="Client IP address")
    user_agent: Optional[str] = Field(None, description="User agent string")
    referrer: Optional[str] = Field(None, description="HTTP referer")
    
    # Derived metadata
    browser: str = UNKNOWN
    os: str = UNKNOWN
    location: Location = UNKNOWN_LOCATION
    
    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "id": "9b2c1f4e-7d1a-4d5e-9a43-3c4b1f0e2a77",
                "timestamp": "2025-10-29T10:30:00Z",
                "source_ip": "203.0.113.7",
                "user_agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) Chrome/120.0",
                "referrer": "https://twitter.com",
                "browser": "Chrome",
                "os": "Windows",
                "location": {
                    "country": "US",
                    "region": "CA",
                    "city": "San Francisco",
                    "coordinates": [37.77, -122.42],
                },
            }
        },
    )
