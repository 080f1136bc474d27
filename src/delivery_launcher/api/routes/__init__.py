"""Route group exports."""

from . import delivery, health, zones

__all__ = ["delivery", "health", "zones"]
