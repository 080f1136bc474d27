"""Domain models for shipping options, classification results and selections."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


@dataclass(slots=True)
class ShippingOption:
    """A priced carrier service eligible for an order."""

    option_id: str
    carrier_id: str
    carrier_name: str
    service_level: str
    price: float
    lead_time_days: int


@dataclass(slots=True)
class ClassifierConfig:
    """Versioned knobs of the fastest/cheapest classification."""

    version: str = "1"
    lead_time_tolerance_days: int = 1
    rebalance_min_distinct_carriers: int = 3


@dataclass(slots=True)
class ClassificationResult:
    cheapest: List[ShippingOption] = field(default_factory=list)
    fastest: List[ShippingOption] = field(default_factory=list)

    @property
    def best_cheapest(self) -> Optional[ShippingOption]:
        return self.cheapest[0] if self.cheapest else None

    @property
    def best_fastest(self) -> Optional[ShippingOption]:
        return self.fastest[0] if self.fastest else None

    @property
    def is_empty(self) -> bool:
        return not self.cheapest and not self.fastest

    def bucket(self, source: "SelectionSource") -> List[ShippingOption]:
        return self.fastest if source is SelectionSource.FASTEST else self.cheapest


class SelectionSource(str, Enum):
    FASTEST = "fastest"
    CHEAPEST = "cheapest"


@dataclass(frozen=True, slots=True)
class Selection:
    """The operator's single pick, tagged with the list it came from."""

    source: SelectionSource
    option_id: str

