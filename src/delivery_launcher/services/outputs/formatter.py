"""Labels and notices handed to the presentation layer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

from ...models.domain import ShippingOption

NoticeVariant = Literal["success", "info", "warning", "error"]


@dataclass(slots=True)
class Notice:
    title: str
    message: str
    variant: NoticeVariant


def format_price(price: float) -> str:
    if float(price).is_integer():
        return str(int(price))
    return f"{price:.2f}"


def option_summary(option: ShippingOption) -> str:
    return f"{option.carrier_name} ({format_price(option.price)}€, {option.lead_time_days} jours)"


def option_detail_label(option: ShippingOption) -> str:
    return (
        f"{option.carrier_name} • {option.service_level} • "
        f"{format_price(option.price)} • {option.lead_time_days} j"
    )


def best_label(option: Optional[ShippingOption]) -> str:
    if option is None:
        return "—"
    return f"{option.carrier_name} • {option.service_level} • {format_price(option.price)}"


def options_updated_notice() -> Notice:
    return Notice("Options mises à jour", "Les options de transport ont été calculées.", "success")


def no_options_notice() -> Notice:
    return Notice("Aucune option", "Aucune option de transport compatible pour cette commande.", "info")


def shipment_created_notice(shipment_id: str) -> Notice:
    return Notice("Livraison lancée", f"Shipment créé : {shipment_id}", "success")
