from typing import List

from fastapi import APIRouter, Depends, Request, status

from shortlinks_app.dependencies import get_url_service
from shortlinks_app.schemas.url import (
    Envelope,
    ShortenRequest,
    ShortenResponse,
    StatsResponse,
    SweepResponse,
    UrlSummaryResponse,
)
from shortlinks_app.services.url_service import URLService

router = APIRouter(prefix="/shorturls", tags=["shorturls"])


@router.post("", response_model=ShortenResponse, status_code=status.HTTP_201_CREATED)
async def create_short_url(
    payload: ShortenRequest,
    request: Request,
    url_service: URLService = Depends(get_url_service)
):
    """Create a new short URL"""
    result = await url_service.shorten(
        payload.url,
        validity_minutes=payload.validity,
        shortcode=payload.shortcode,
        created_by=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
    return ShortenResponse(
        shortcode=result.shortcode,
        short_link=result.short_link,
        expiry=result.expiry,
    )


@router.get("", response_model=Envelope[List[UrlSummaryResponse]])
async def list_short_urls(
    url_service: URLService = Depends(get_url_service)
):
    """List every short URL still held, with its click count"""
    summaries = await url_service.list_urls()
    return Envelope[List[UrlSummaryResponse]](
        data=[
            UrlSummaryResponse.from_summary(summary, url_service.build_short_link(summary.shortcode))
            for summary in summaries
        ]
    )


@router.post("/sweep", response_model=SweepResponse)
async def sweep_expired_urls(
    url_service: URLService = Depends(get_url_service)
):
    """Remove expired short URLs now instead of waiting for the worker"""
    removed = await url_service.sweep_expired()
    return SweepResponse(removed=removed)


@router.get("/{shortcode}", response_model=StatsResponse)
async def get_url_stats(
    shortcode: str,
    url_service: URLService = Depends(get_url_service)
):
    """Get statistics for a short URL (also for expired ones)"""
    stats = await url_service.get_stats(shortcode)
    return StatsResponse.from_view(stats)
