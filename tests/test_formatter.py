from delivery_launcher.models.domain import ShippingOption
from delivery_launcher.services.outputs.formatter import (
    best_label,
    format_price,
    option_detail_label,
    option_summary,
    shipment_created_notice,
)


def _option(price: float, lead_time_days: int = 2) -> ShippingOption:
    return ShippingOption(
        option_id="OPT1",
        carrier_id="CAR1",
        carrier_name="Colissimo",
        service_level="Express",
        price=price,
        lead_time_days=lead_time_days,
    )


def test_option_summary():
    assert option_summary(_option(12)) == "Colissimo (12€, 2 jours)"
    assert option_summary(_option(9.5, 3)) == "Colissimo (9.50€, 3 jours)"


def test_format_price():
    assert format_price(10.0) == "10"
    assert format_price(0) == "0"
    assert format_price(4.999) == "5.00"


def test_labels():
    assert option_detail_label(_option(12)) == "Colissimo • Express • 12 • 2 j"
    assert best_label(_option(12)) == "Colissimo • Express • 12"
    assert best_label(None) == "—"


def test_shipment_created_notice():
    notice = shipment_created_notice("SHP-1")
    assert notice.variant == "success"
    assert notice.message == "Shipment créé : SHP-1"
