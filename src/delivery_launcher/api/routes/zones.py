"""Delivery zone endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from ...config import settings
from ...services.zones import resolve_zone, zone_options

router = APIRouter(prefix="/zones", tags=["zones"])


@router.get("", status_code=status.HTTP_200_OK)
def list_zones() -> dict:
    """Zone picker entries, in display order."""
    return {"zones": zone_options(), "default_zone": settings.default_zone}


@router.get("/resolve", status_code=status.HTTP_200_OK)
def resolve(country: str | None = Query(default=None, description="Country name or ISO code")) -> dict:
    zone = resolve_zone(country)
    return {
        "country": country,
        "zone_code": zone,
        "policy": settings.unresolved_zone_policy,
        "requires_prompt": zone is None,
    }
