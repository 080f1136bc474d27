"""Shipping option classification helpers."""

from .classifier import (
    InvalidOptionError,
    classify,
    distinct_carrier_count,
    premium_speed_set,
    validate_options,
)

__all__ = [
    "classify",
    "validate_options",
    "distinct_carrier_count",
    "premium_speed_set",
    "InvalidOptionError",
]
