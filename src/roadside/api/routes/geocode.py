"""Geocoding endpoint backed by Kakao Local."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status

from ...errors import ConfigError, DistanceServiceError
from ...models.domain import Point
from ...services.geocoding import KakaoGeocoder

router = APIRouter(tags=["geocode"])


def get_geocoder() -> KakaoGeocoder:
    return KakaoGeocoder()


@router.get("/geocode", status_code=status.HTTP_200_OK)
def geocode(
    address: Optional[str] = Query(None, description="Address or landmark to resolve."),
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lng: Optional[float] = Query(None, ge=-180, le=180),
) -> dict:
    """Forward geocode ``address``, or reverse geocode ``lat``/``lng``."""
    if not address and (lat is None or lng is None):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Provide either address, or both lat and lng.",
        )
    try:
        geocoder = get_geocoder()
        if address:
            match = geocoder.address_to_coord(address)
            if match is None:
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"No results found for: {address}")
            return {"success": True, "result": match.to_dict()}

        reverse = geocoder.coord_to_address(Point(lat=lat, lng=lng))
        if reverse is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"No address found for coordinates: {lng}, {lat}",
            )
        return {"success": True, "result": reverse.to_dict()}
    except ConfigError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except DistanceServiceError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
