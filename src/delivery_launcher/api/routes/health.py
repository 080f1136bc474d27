"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


def _get_carrier_health_check():
    """Lazy import to avoid startup failures."""
    from ...services.carriers.client import check_health as carrier_health_check
    return carrier_health_check


@router.get("/health/carrier-service", status_code=status.HTTP_200_OK)
def health_carrier_service() -> dict:
    """Check carrier service reachability."""
    carrier_health_check = _get_carrier_health_check()
    return {"service": "carrier-service", "healthy": carrier_health_check()}
