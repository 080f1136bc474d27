"""Fastest/cheapest classification of compatible shipping options."""

from __future__ import annotations

import math
from typing import List, Sequence

from ...models.domain import ClassificationResult, ClassifierConfig, ShippingOption


class InvalidOptionError(ValueError):
    """Raised when an option cannot be classified (negative values, missing ids)."""


def validate_options(options: Sequence[ShippingOption]) -> None:
    seen: set[str] = set()
    for index, option in enumerate(options):
        if not option.option_id:
            raise InvalidOptionError(f"Option at position {index} has no option id.")
        if not option.carrier_id:
            raise InvalidOptionError(f"Option '{option.option_id}' has no carrier id.")
        if option.option_id in seen:
            raise InvalidOptionError(f"Duplicate option id '{option.option_id}'.")
        seen.add(option.option_id)

        price = option.price
        if isinstance(price, bool) or not isinstance(price, (int, float)) or not math.isfinite(price):
            raise InvalidOptionError(f"Option '{option.option_id}' has an invalid price: {price!r}.")
        if price < 0:
            raise InvalidOptionError(f"Option '{option.option_id}' has a negative price: {price}.")

        lead_time = option.lead_time_days
        if isinstance(lead_time, bool) or not isinstance(lead_time, int):
            raise InvalidOptionError(
                f"Option '{option.option_id}' has a non-integer lead time: {lead_time!r}."
            )
        if lead_time < 0:
            raise InvalidOptionError(f"Option '{option.option_id}' has a negative lead time: {lead_time}.")


def distinct_carrier_count(options: Sequence[ShippingOption]) -> int:
    return len({option.carrier_id for option in options})


def premium_speed_set(options: Sequence[ShippingOption], tolerance_days: int) -> List[ShippingOption]:
    """Options whose lead time is within ``tolerance_days`` of the fastest one."""
    if not options:
        return []
    min_lead_time = min(option.lead_time_days for option in options)
    return [option for option in options if option.lead_time_days <= min_lead_time + tolerance_days]


def _price_key(option: ShippingOption) -> tuple[float, str]:
    return (option.price, option.option_id)


def _speed_key(option: ShippingOption) -> tuple[int, float, str]:
    return (option.lead_time_days, option.price, option.option_id)


def _rebalance(
    cheapest: List[ShippingOption],
    fastest: List[ShippingOption],
) -> None:
    # Single pass, at most one option moves.
    if not cheapest and fastest:
        moved = min(fastest, key=_price_key)
        fastest.remove(moved)
        cheapest.append(moved)
    elif not fastest and cheapest:
        moved = min(cheapest, key=_speed_key)
        cheapest.remove(moved)
        fastest.append(moved)


def classify(
    options: Sequence[ShippingOption],
    config: ClassifierConfig | None = None,
) -> ClassificationResult:
    """Split options into a cheapest list and a fastest list.

    Options priced strictly below the cheapest option of the premium-speed band
    are economy picks; everything else is framed as paying for speed. When the
    input spans enough distinct carriers, an empty bucket receives one option
    from the other so both recommendations can be shown.

    Args:
        options: Compatible options for one order. Never mutated.
        config: Tolerance and rebalancing threshold; defaults to ``ClassifierConfig()``.

    Returns:
        ``cheapest`` sorted by price, ``fastest`` sorted by lead time then price.
        Both sorts are stable so equal options keep their input order.

    Raises:
        InvalidOptionError: if any option has a negative or non-numeric price or
            lead time, a missing id, or a duplicated option id.
    """
    config = config or ClassifierConfig()
    validate_options(options)
    if not options:
        return ClassificationResult(cheapest=[], fastest=[])

    premium = premium_speed_set(options, config.lead_time_tolerance_days)
    price_threshold = min((option.price for option in premium), default=math.inf)

    cheapest: List[ShippingOption] = []
    fastest: List[ShippingOption] = []
    for option in options:
        if option.price < price_threshold:
            cheapest.append(option)
        else:
            fastest.append(option)

    if distinct_carrier_count(options) >= config.rebalance_min_distinct_carriers:
        _rebalance(cheapest, fastest)

    cheapest.sort(key=lambda option: option.price)
    fastest.sort(key=lambda option: (option.lead_time_days, option.price))
    return ClassificationResult(cheapest=cheapest, fastest=fastest)
