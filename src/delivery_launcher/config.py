"""Application configuration and settings management."""

from typing import Any, Literal, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="DELIVERY_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Delivery Launcher API"
    api_prefix: str = "/api"

    # Carrier service (options lookup + shipment submission)
    carrier_service_base_url: Optional[str] = Field(
        default=None,
        description="Base URL of the carrier service exposing transport options and shipments.",
    )
    carrier_service_timeout_seconds: float = Field(default=30.0, gt=0.0)
    carrier_service_max_retries: int = Field(default=2, ge=0)
    carrier_service_backoff_seconds: float = Field(default=0.5, ge=0.0)

    # Classification
    classifier_version: str = Field(default="1", description="Version tag of the classification rules.")
    lead_time_tolerance_days: int = Field(
        default=1,
        ge=0,
        description="Days added to the fastest lead time to form the premium-speed band.",
    )
    rebalance_min_distinct_carriers: int = Field(
        default=3,
        ge=1,
        description="Distinct carriers required before an empty bucket is refilled.",
    )

    # Zones
    supported_zones: tuple[str, ...] = Field(default=("FR", "BE", "CH", "LU"))
    unresolved_zone_policy: Literal["prompt", "default"] = Field(
        default="prompt",
        description="What to do when a shipping country maps to no zone: ask the operator or use default_zone.",
    )
    default_zone: str = Field(default="FR")

    # Permission gate (feature toggle only, never enforced by the classifier)
    can_launch_delivery: bool = True

    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("default_zone", mode="before")
    @classmethod
    def _upper_zone(cls, value: Any) -> str:
        return str(value).strip().upper()

    @field_validator("frontend_allowed_origins", "supported_zones", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            # Try JSON first
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
