from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse

from shortlinks_app.dependencies import get_url_service
from shortlinks_app.services.url_service import URLService

router = APIRouter(tags=["redirect"])


@router.get("/{shortcode}")
async def redirect_to_original_url(
    shortcode: str,
    request: Request,
    url_service: URLService = Depends(get_url_service)
):
    """
    Redirect to the original URL.
    
    Flow:
    1. Look the record up and check expiry (404 / 410 on failure)
    2. Record the click with the request provenance
    3. Redirect
    """
    original_url = await url_service.resolve(
        shortcode,
        source_ip=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
        referrer=request.headers.get("referer"),
    )
    return RedirectResponse(url=original_url, status_code=status.HTTP_302_FOUND)
