"""Application configuration and settings management."""

from typing import Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigError

# Values shipped in the sample .env file; treated the same as a missing key.
PLACEHOLDER_KEYS = frozenset(
    {
        "your_google_places_api_key_here",
        "your_rest_api_key_here",
        "changeme",
    }
)


def is_usable_key(key: Optional[str]) -> bool:
    return bool(key and key.strip() and key.strip().lower() not in PLACEHOLDER_KEYS)


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="ROADSIDE_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    app_name: str = "Roadside Places API"
    api_prefix: str = "/api"
    log_level: str = "INFO"

    # Credentials keep their upstream variable names.
    google_places_api_key: Optional[str] = Field(
        default=None,
        alias="GOOGLE_PLACES_API_KEY",
        description="Key for Google Distance Matrix, Routes and Places.",
    )
    kakao_rest_api_key: Optional[str] = Field(
        default=None,
        alias="KAKAO_REST_API_KEY",
        description="REST key for Kakao Local and Kakao Mobility.",
    )

    distance_matrix_url: str = Field(
        default="https://maps.googleapis.com/maps/api/distancematrix/json",
        description="Google Distance Matrix endpoint.",
    )
    google_routes_url: str = Field(
        default="https://routes.googleapis.com/directions/v2:computeRoutes",
    )
    kakao_directions_url: str = Field(
        default="https://apis-navi.kakaomobility.com/v1/directions",
    )
    kakao_local_base_url: str = Field(default="https://dapi.kakao.com/v2/local")
    google_photo_url: str = Field(default="https://maps.googleapis.com/maps/api/place/photo")

    http_timeout_seconds: float = Field(default=15.0, gt=0.0)
    http_max_retries: int = Field(default=1, ge=0)
    http_backoff_seconds: float = Field(default=0.5, ge=0.0)

    matrix_batch_size: int = Field(default=25, ge=1, le=25)
    matrix_language: str = Field(default="ko")
    walking_threshold_m: int = Field(
        default=2000,
        ge=0,
        description="Thresholds at or below this pick walking mode when no mode is given.",
    )

    segment_interval_m: int = Field(default=5000, ge=1)
    segment_search_radius_m: int = Field(default=2000, ge=1)
    polyline_search_radius_m: int = Field(default=5000, ge=1)

    photo_max_workers: int = Field(default=8, ge=1)
    photo_thumbnail_width: int = Field(default=200, ge=1)
    photo_display_width: int = Field(default=400, ge=1)

    frontend_allowed_origins: tuple[str, ...] = Field(
        default=("http://localhost:5173", "http://127.0.0.1:5173"),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()

    @property
    def has_google_api_key(self) -> bool:
        return is_usable_key(self.google_places_api_key)

    @property
    def has_kakao_api_key(self) -> bool:
        return is_usable_key(self.kakao_rest_api_key)

    def require_google_api_key(self) -> str:
        if not self.has_google_api_key:
            raise ConfigError(
                "GOOGLE_PLACES_API_KEY is not set. Get a key from https://console.cloud.google.com"
            )
        return self.google_places_api_key.strip()

    def require_kakao_api_key(self) -> str:
        if not self.has_kakao_api_key:
            raise ConfigError(
                "KAKAO_REST_API_KEY is not set. Get a key from https://developers.kakao.com"
            )
        return self.kakao_rest_api_key.strip()


settings = Settings()
