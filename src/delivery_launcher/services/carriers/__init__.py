"""Carrier service collaborators."""

from .client import CarrierServiceClient, UpstreamError, check_health, normalise_error_message

__all__ = [
    "CarrierServiceClient",
    "UpstreamError",
    "check_health",
    "normalise_error_message",
]
