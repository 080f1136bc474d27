import pytest

from delivery_launcher.services.zones import normalize_zone_code, resolve_zone, zone_options


@pytest.mark.parametrize(
    "country, expected",
    [
        ("France", "FR"),
        ("FR", "FR"),
        (" fr ", "FR"),
        ("Belgique", "BE"),
        ("Kingdom of Belgium", "BE"),
        ("BE", "BE"),
        ("Suisse", "CH"),
        ("Switzerland", "CH"),
        ("CH", "CH"),
        ("Luxembourg", "LU"),
        ("lu", "LU"),
    ],
)
def test_resolve_zone_known_countries(country, expected):
    assert resolve_zone(country, policy="prompt") == expected


def test_resolve_zone_unknown_country_prompts():
    assert resolve_zone("Germany", policy="prompt") is None
    assert resolve_zone(None, policy="prompt") is None
    # ISO codes must match exactly, not as substrings
    assert resolve_zone("AFRICA", policy="prompt") is None


def test_resolve_zone_unknown_country_uses_default_policy():
    assert resolve_zone("Germany", policy="default") == "FR"
    assert resolve_zone("", policy="default", default_zone="be") == "BE"


def test_zone_options_order_and_labels():
    assert zone_options() == [
        {"label": "France (FR)", "value": "FR"},
        {"label": "Belgique (BE)", "value": "BE"},
        {"label": "Suisse (CH)", "value": "CH"},
        {"label": "Luxembourg (LU)", "value": "LU"},
    ]


def test_normalize_zone_code():
    assert normalize_zone_code(" ch ") == "CH"
    with pytest.raises(ValueError):
        normalize_zone_code("DE")
