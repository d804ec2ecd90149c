"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...config import settings

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Liveness plus which upstream credentials are configured."""
    return {
        "status": "ok",
        "providers": {
            "google": settings.has_google_api_key,
            "kakao": settings.has_kakao_api_key,
        },
    }
