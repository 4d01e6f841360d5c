"""Integration tests for the delivery endpoints via TestClient."""

from dataclasses import replace

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from shipping.api import delivery_router, register_shipping_exception_handlers
from shipping.providers import set_selector
from shipping.providers.fake_adapter import FakePushProvider
from shipping.providers.selector import ProviderSelector


@pytest.fixture()
def client(selector):
    app = FastAPI()
    app.include_router(delivery_router)
    register_shipping_exception_handlers(app)
    return TestClient(app)


def _payload(order_id="ORDER-500", **overrides):
    payload = {
        "orderId": order_id,
        "shippingAddress": {
            "street": "Calle Mayor 1",
            "city": "Madrid",
            "zipCode": "28013",
            "country": "ES",
        },
        "customerInfo": {"name": "Lucia Perez", "email": "lucia@example.com"},
    }
    payload.update(overrides)
    return payload


class _FixedTrackingProvider(FakePushProvider):
    """Issues every label under the same tracking number."""

    def __init__(self, tracking_number):
        super().__init__()
        self._tracking_number = tracking_number

    async def generate_label(self, order_id, shipping_address, customer_info):
        label = await super().generate_label(order_id, shipping_address, customer_info)
        return replace(label, tracking_number=self._tracking_number)


class TestCreateDeliveryAPI:
    def test_create_returns_201_with_label(self, client):
        response = client.post("/deliveries", json=_payload())
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["orderId"] == "ORDER-500"
        assert body["data"]["status"] == "CONFIRMED"
        assert body["data"]["trackingNumber"].startswith("FAKE-")
        assert "deliveryId" in body["data"]
        assert "estimatedDelivery" in body["data"]

    def test_duplicate_order_returns_409(self, client):
        client.post("/deliveries", json=_payload())
        response = client.post("/deliveries", json=_payload())
        assert response.status_code == 409
        assert response.json()["error"] == "CONFLICT"

    def test_short_order_id_returns_400(self, client):
        response = client.post("/deliveries", json=_payload(order_id="ab"))
        assert response.status_code == 400

    def test_missing_fields_are_rejected_by_schema(self, client):
        response = client.post("/deliveries", json={"orderId": "ORDER-1"})
        assert response.status_code == 422

    def test_no_provider_returns_503(self, client, pull_provider, push_provider):
        pull_provider.configure(available=False)
        push_provider.configure(available=False)
        response = client.post("/deliveries", json=_payload())
        assert response.status_code == 503
        assert response.json()["error"] == "SERVICE_UNAVAILABLE"

    def test_label_failure_returns_502(self, client, pull_provider, push_provider):
        pull_provider.configure(should_succeed=False)
        push_provider.configure(should_succeed=False)
        response = client.post("/deliveries", json=_payload())
        assert response.status_code == 502
        assert response.json()["error"] == "PROVIDER_UNAVAILABLE"

    def test_reused_tracking_number_returns_409_duplicate_key(self, client):
        set_selector(ProviderSelector([_FixedTrackingProvider("FIXED-TRK-1")]))

        assert client.post("/deliveries", json=_payload(order_id="ORDER-501")).status_code == 201
        response = client.post("/deliveries", json=_payload(order_id="ORDER-502"))

        assert response.status_code == 409
        assert response.json()["error"] == "DUPLICATE_KEY"


class TestDeliveryStatusAPI:
    def test_get_status(self, client):
        delivery_id = client.post("/deliveries", json=_payload()).json()["data"]["deliveryId"]
        response = client.get(f"/deliveries/{delivery_id}/status")
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["deliveryId"] == delivery_id
        assert data["status"] == "CONFIRMED"
        assert data["orderId"] == "ORDER-500"

    def test_get_status_unknown_returns_404(self, client):
        response = client.get("/deliveries/507f1f77bcf86cd799439011/status")
        assert response.status_code == 404
        assert response.json()["error"] == "DELIVERY_NOT_FOUND"

    def test_get_status_malformed_id_returns_400(self, client):
        response = client.get("/deliveries/not-an-id/status")
        assert response.status_code == 400

    def test_put_status(self, client):
        delivery_id = client.post("/deliveries", json=_payload()).json()["data"]["deliveryId"]
        response = client.put(f"/deliveries/{delivery_id}/status", json={"status": "IN_TRANSIT"})
        assert response.status_code == 200
        body = response.json()
        assert body["previousStatus"] == "CONFIRMED"
        assert body["newStatus"] == "IN_TRANSIT"

        status = client.get(f"/deliveries/{delivery_id}/status").json()["data"]
        assert status["status"] == "IN_TRANSIT"

    def test_put_status_unknown_value_is_rejected_by_schema(self, client):
        delivery_id = client.post("/deliveries", json=_payload()).json()["data"]["deliveryId"]
        response = client.put(f"/deliveries/{delivery_id}/status", json={"status": "LOST"})
        assert response.status_code == 422
