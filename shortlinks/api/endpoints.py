"""
FastAPI Endpoints for the Short Link Service

This module defines all REST API endpoints with minimal logic.
Endpoints only handle:
- Request parsing (Pydantic models)
- Rate limiting
- Error handling and HTTP responses
- Delegating to service layer

Management endpoints live under /api so that every valid short code
(including words like "docs" or "health") is reachable at /{short_code}.
"""

from fastapi import APIRouter, Request, Depends, HTTPException, status
from fastapi.responses import RedirectResponse

from shortlinks.api.schemas import ShortenRequest, ShortenResponse
from shortlinks.core.exceptions import (
    EmptyInputError,
    InvalidURLError,
    InvalidShortCodeError,
    ShortCodeInUseError,
    CodeSpaceExhaustedError,
    DatabaseError,
)
from shortlinks.core.rate_limit import limiter, RATE_LIMITS
from shortlinks.core.setting import settings
from shortlinks.core.store_manager import get_link_store
from shortlinks.services.link_store import LinkStore
from shortlinks.services.redirect_service import RedirectService, ResolutionStatus
from shortlinks.services.url_service import URLShorteningService

EXPIRED_MESSAGE = "This short URL has expired."

api_router = APIRouter(prefix="/api")
redirect_router = APIRouter()


@api_router.post(
    "/shorten",
    response_model=ShortenResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a short URL",
    description="Takes a long URL, an optional custom code and an optional validity in minutes"
)
@limiter.limit(RATE_LIMITS["shorten"])
async def create_short_url(
    request: Request,  # Required for rate limiting (slowapi expects parameter named 'request')
    body: ShortenRequest,
    store: LinkStore = Depends(get_link_store)
) -> ShortenResponse:
    """
    Create a new short URL from a long URL.

    Returns:
        ShortenResponse with short_code, short_url, original_url and expires_at

    Raises:
        HTTPException 400: Blank or invalid URL, malformed custom code
        HTTPException 409: Custom code already in use
        HTTPException 503: No free random code could be generated
        HTTPException 500: Storage failure
    """
    url_service = URLShorteningService(store)

    try:
        record = await url_service.create_short_url(
            body.url,
            custom_code=body.custom_code,
            validity_minutes=body.validity,
        )
    except (EmptyInputError, InvalidURLError, InvalidShortCodeError) as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message
        )
    except ShortCodeInUseError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=e.message
        )
    except CodeSpaceExhaustedError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=e.message
        )
    except DatabaseError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=e.message
        )

    return ShortenResponse.from_record(record, settings.BASE_URL)


@api_router.get(
    "/links",
    response_model=list[ShortenResponse],
    summary="List short URLs",
    description="Returns every stored short URL, newest first, including expired ones"
)
@limiter.limit(RATE_LIMITS["links"])
async def list_short_urls(
    request: Request,  # Required for rate limiting
    store: LinkStore = Depends(get_link_store)
) -> list[ShortenResponse]:
    url_service = URLShorteningService(store)

    try:
        records = await url_service.list_short_urls()
    except DatabaseError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=e.message
        )

    return [ShortenResponse.from_record(record, settings.BASE_URL) for record in records]


@redirect_router.get(
    "/{short_code}",
    status_code=status.HTTP_302_FOUND,
    summary="Redirect to original URL",
    description="Redirects to the original URL while the short code is unexpired"
)
@limiter.limit(RATE_LIMITS["redirect"])
async def redirect_to_url(
    short_code: str,
    request: Request,
    store: LinkStore = Depends(get_link_store)
) -> RedirectResponse:
    """
    Redirect to the original URL for a given short code.

    Returns:
        RedirectResponse (HTTP 302) to original URL

    Raises:
        HTTPException 404: If short code not found
        HTTPException 410: If short code has expired
        HTTPException 429: If rate limit exceeded
    """
    redirect_service = RedirectService(store)

    try:
        resolution = await redirect_service.resolve_short_code(short_code)
    except DatabaseError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=e.message
        )

    if resolution.status is ResolutionStatus.NOT_FOUND:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Short code '{short_code}' not found"
        )

    if resolution.status is ResolutionStatus.EXPIRED:
        raise HTTPException(
            status_code=status.HTTP_410_GONE,
            detail=EXPIRED_MESSAGE
        )

    return RedirectResponse(
        url=resolution.record.long_url,
        status_code=status.HTTP_302_FOUND
    )
