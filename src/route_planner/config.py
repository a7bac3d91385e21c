"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="RP_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Field Visit Route Planner API"
    api_prefix: str = "/api"
    data_root: Path = Field(default=Path("data"), description="Root directory for run outputs.")
    persist_outputs_by_default: bool = Field(
        default=False,
        description="Write summary.json/route.csv for each optimization unless the request overrides it.",
    )
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    # Defaults applied when an optimization request omits its settings
    default_start_lat: float = Field(default=40.4168, ge=-90.0, le=90.0)
    default_start_lng: float = Field(default=-3.7038, ge=-180.0, le=180.0)
    default_start_name: Optional[str] = "Oficina"
    default_start_address: Optional[str] = "Oficina Central, Madrid"
    default_start_time: str = Field(default="09:00", description="Day start as HH:MM.")
    default_visit_duration_min: int = Field(default=60, ge=1)
    default_speed_kmh: float = Field(default=30.0, gt=0.0)
    default_include_traffic_buffer: bool = True
    default_traffic_buffer_percent: float = Field(default=20.0, ge=0.0, lt=100.0)
    default_prioritize_time_windows: bool = True

    # Validation thresholds
    efficiency_suggestion_threshold: int = Field(default=60, ge=0, le=100)
    long_leg_suggestion_km: float = Field(default=20.0, ge=0.0)
    high_priority_share_warning: float = Field(default=0.7, ge=0.0, le=1.0)

    @field_validator("data_root", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

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
