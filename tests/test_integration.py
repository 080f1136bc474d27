import pytest
from fastapi.testclient import TestClient

from delivery_launcher.main import create_app
from delivery_launcher.models.domain import ShippingOption
from delivery_launcher.services.carriers.client import UpstreamError


def _option(option_id: str, price: float, lead_time_days: int) -> ShippingOption:
    return ShippingOption(
        option_id=option_id,
        carrier_id=f"CAR-{option_id}",
        carrier_name=f"Carrier {option_id}",
        service_level="Standard",
        price=price,
        lead_time_days=lead_time_days,
    )


class DummyCarrierService:
    options = [_option("A", 5, 2), _option("B", 6, 2), _option("C", 7, 2)]
    fail_with = None

    def __init__(self, *args, **kwargs):
        pass

    def fetch_options(self, order_id, zone_code=None):
        if self.fail_with:
            raise self.fail_with
        return list(self.options)

    def launch_delivery(self, order_id, option_id, tracking_number=None, zone_code=None):
        if self.fail_with:
            raise self.fail_with
        return f"SHP-{order_id}-{option_id}"


@pytest.fixture(autouse=True)
def clear_sessions():
    from delivery_launcher.services.delivery.session import sessions

    sessions.clear()
    yield
    sessions.clear()


@pytest.fixture
def api_client(monkeypatch: pytest.MonkeyPatch) -> TestClient:
    from delivery_launcher.services.delivery import service as delivery_service

    monkeypatch.setattr(DummyCarrierService, "fail_with", None)
    monkeypatch.setattr(delivery_service, "CarrierServiceClient", DummyCarrierService)
    return TestClient(create_app())


def test_health(api_client: TestClient):
    response = api_client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_zones_endpoints(api_client: TestClient):
    zones = api_client.get("/api/zones").json()
    assert [zone["value"] for zone in zones["zones"]] == ["FR", "BE", "CH", "LU"]

    resolved = api_client.get("/api/zones/resolve", params={"country": "Belgique"}).json()
    assert resolved["zone_code"] == "BE"
    assert resolved["requires_prompt"] is False


def test_transport_options_then_launch(api_client: TestClient):
    options = api_client.post("/api/orders/ORD-7/transport-options", json={"zone_code": "FR"})

    assert options.status_code == 200
    payload = options.json()
    assert [o["option_id"] for o in payload["cheapest"]] == ["A"]
    assert [o["option_id"] for o in payload["fastest"]] == ["B", "C"]
    assert payload["selection"] == {"source": "cheapest", "option_id": "A"}
    assert payload["fastest"][0]["summary"] == "Carrier B (6€, 2 jours)"

    launched = api_client.post(
        "/api/orders/ORD-7/launch",
        json={"selection": {"source": "fastest", "option_id": "C"}, "tracking_number": "TRK-1"},
    )

    assert launched.status_code == 200
    body = launched.json()
    assert body["shipment_id"] == "SHP-ORD-7-C"
    assert body["tracking_number"] == "TRK-1"
    assert body["notice"]["variant"] == "success"


def test_transport_options_without_body(api_client: TestClient):
    response = api_client.post("/api/orders/ORD-7/transport-options")
    assert response.status_code == 200
    assert response.json()["zone_code"] is None


def test_invalid_zone_returns_400(api_client: TestClient):
    response = api_client.post("/api/orders/ORD-7/transport-options", json={"zone_code": "DE"})
    assert response.status_code == 400


def test_upstream_failure_returns_502(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(DummyCarrierService, "fail_with", UpstreamError("Commande introuvable"))

    response = api_client.post("/api/orders/ORD-7/transport-options", json={})

    assert response.status_code == 502
    assert response.json()["detail"] == "Commande introuvable"


def test_launch_before_loading_options_returns_400(api_client: TestClient):
    response = api_client.post("/api/orders/ORD-8/launch", json={})
    assert response.status_code == 400


def test_launch_while_submitting_returns_409(api_client: TestClient):
    from delivery_launcher.services.delivery.session import sessions

    api_client.post("/api/orders/ORD-9/transport-options", json={})
    with sessions.get("ORD-9").submission():
        response = api_client.post("/api/orders/ORD-9/launch", json={})

    assert response.status_code == 409


def test_classify_endpoint(api_client: TestClient):
    response = api_client.post(
        "/api/classify",
        json={
            "options": [
                {"option_id": "A", "carrier_id": "A", "price": 10, "lead_time_days": 1},
                {"option_id": "B", "carrier_id": "B", "price": 12, "lead_time_days": 1},
                {"option_id": "C", "carrier_id": "C", "price": 8, "lead_time_days": 3},
            ]
        },
    )

    assert response.status_code == 200
    payload = response.json()
    assert [o["option_id"] for o in payload["cheapest"]] == ["C"]
    assert [o["option_id"] for o in payload["fastest"]] == ["A", "B"]
    assert payload["best_fastest"]["option_id"] == "A"


def test_classify_endpoint_rejects_negative_price(api_client: TestClient):
    response = api_client.post(
        "/api/classify",
        json={"options": [{"option_id": "A", "carrier_id": "A", "price": -1, "lead_time_days": 1}]},
    )
    assert response.status_code == 400


def test_feature_hidden_without_permission(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    from delivery_launcher.config import settings

    monkeypatch.setattr(settings, "can_launch_delivery", False)

    assert api_client.post("/api/orders/ORD-7/transport-options", json={}).status_code == 404
    assert api_client.post("/api/classify", json={"options": []}).status_code == 404
    assert api_client.get("/api/health").status_code == 200
