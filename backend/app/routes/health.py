"""
Guestbook API — Health Check and Banner Routes
===============================================

What:  GET /health for monitoring probes and GET / as a liveness banner.
How:   Neither route touches the store; both always succeed while the
       process is serving requests.
"""

from datetime import datetime, timezone

from fastapi import APIRouter

from app.schemas.message import BannerResponse, HealthResponse

router = APIRouter(tags=["Health"])


@router.get(
    "/",
    response_model=BannerResponse,
    summary="Service banner",
)
async def banner() -> BannerResponse:
    return BannerResponse(message="Guestbook API is running!")


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description="Returns status OK with the current server time. Never queries the store.",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="OK", timestamp=datetime.now(timezone.utc))
