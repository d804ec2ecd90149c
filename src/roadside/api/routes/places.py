"""Place normalization endpoint."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from ...schemas.places import NormalizeRequest
from ...services.places.service import normalize_places

router = APIRouter(prefix="/places", tags=["places"])


@router.post("/normalize", status_code=status.HTTP_200_OK)
def normalize(payload: NormalizeRequest) -> dict:
    try:
        return normalize_places(payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
