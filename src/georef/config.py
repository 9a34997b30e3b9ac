"""Application configuration and settings management."""

from typing import Any, Literal, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="GEOREF_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Georef Visit Planning API"
    api_prefix: str = "/api"
    google_maps_api_key: Optional[str] = Field(
        default=None,
        description="Server-side key for the Google Directions API.",
    )
    directions_base_url: str = Field(
        default="https://maps.googleapis.com/maps/api",
        description="Base URL of the Google Maps web services.",
    )
    directions_timeout_seconds: float = Field(default=10.0, gt=0.0)
    directions_language: str = "pt-BR"
    travel_mode: Literal["driving", "walking", "bicycling", "transit"] = "driving"
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:5000",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    # Supabase configuration
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co).",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key for backend operations.",
    )
    patients_table: str = "pacientes"

    # Workflow (client side)
    api_base_url: str = Field(
        default="http://localhost:8000/api",
        description="Backend base URL used by the visit planning workflow.",
    )
    location_timeout_seconds: float = Field(default=10.0, gt=0.0)
    location_high_accuracy: bool = True
    maps_dir_url: str = "https://www.google.com/maps/dir/"
    upcoming_window_days: int = Field(default=7, ge=0)
    timezone: str = Field(
        default="America/Sao_Paulo",
        description="IANA zone that defines calendar days; aware timestamps are converted to it.",
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


settings = Settings()
