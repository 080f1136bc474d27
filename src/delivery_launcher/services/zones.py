"""Delivery zone helpers: zone picker entries and country to zone resolution."""

from __future__ import annotations

import logging
from typing import Literal, Optional

from ..config import settings

logger = logging.getLogger(__name__)

ZONE_LABELS: dict[str, str] = {
    "FR": "France (FR)",
    "BE": "Belgique (BE)",
    "CH": "Suisse (CH)",
    "LU": "Luxembourg (LU)",
}

# Full country names (French and English spellings) matched as substrings.
_COUNTRY_NAMES: tuple[tuple[str, str], ...] = (
    ("FRANCE", "FR"),
    ("BELGIQUE", "BE"),
    ("BELGIUM", "BE"),
    ("SUISSE", "CH"),
    ("SWITZERLAND", "CH"),
    ("LUXEMBOURG", "LU"),
)


def zone_options() -> list[dict[str, str]]:
    return [
        {"label": ZONE_LABELS.get(code, code), "value": code}
        for code in settings.supported_zones
    ]


def normalize_zone_code(code: str) -> str:
    normalized = (code or "").strip().upper()
    if normalized not in settings.supported_zones:
        raise ValueError(
            f"Unsupported zone '{code}'. Expected one of: {', '.join(settings.supported_zones)}."
        )
    return normalized


def resolve_zone(
    country: Optional[str],
    *,
    policy: Optional[Literal["prompt", "default"]] = None,
    default_zone: Optional[str] = None,
) -> Optional[str]:
    """Map a shipping country name or ISO code to a supported zone.

    Returns ``None`` when the country is unknown and the policy is ``prompt``;
    the caller must then ask the operator for a zone.
    """
    policy = policy or settings.unresolved_zone_policy
    normalized = (country or "").strip().upper()

    if normalized:
        for name, zone in _COUNTRY_NAMES:
            if name in normalized and zone in settings.supported_zones:
                return zone
        if normalized in settings.supported_zones:
            return normalized

    if policy == "default":
        fallback = (default_zone or settings.default_zone).strip().upper()
        logger.info(f"Country '{country}' has no zone mapping, using default zone {fallback}")
        return fallback
    logger.info(f"Country '{country}' has no zone mapping, operator must choose a zone")
    return None
