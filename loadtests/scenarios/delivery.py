"""Delivery lifecycle load scenario.

Create -> Read status -> In transit (webhook) -> Delivered (webhook) ->
Read status. Deliveries labelled by a polling provider are left to the
poller after creation.
"""

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import delivery_data, webhook_data
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import DeliveryState


class DeliveryLifecycleJourney(SequentialTaskSet):
    def on_start(self):
        self.state = DeliveryState()

    @task
    def create_delivery(self):
        payload = delivery_data()
        with self.client.post("/deliveries", json=payload, catch_response=True, name="POST /deliveries") as resp:
            if resp.status_code == 201:
                data = resp.json()["data"]
                self.state.delivery_id = data["deliveryId"]
                self.state.order_id = data["orderId"]
                self.state.tracking_number = data["trackingNumber"]
                self.state.provider = data["provider"]
            elif resp.status_code in (502, 503):
                # Provider capacity is part of the simulation, not a failure of the service
                resp.success()
                self.interrupt()
            else:
                resp.failure(f"Create delivery failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def read_status(self):
        self._read_status()

    @task
    def webhook_in_transit(self):
        self._notify("IN_TRANSIT")

    @task
    def webhook_delivered(self):
        self._notify("DELIVERED")

    @task
    def read_final_status(self):
        self._read_status()
        self.interrupt()

    def _read_status(self):
        with self.client.get(
            f"/deliveries/{self.state.delivery_id}/status",
            catch_response=True,
            name="GET /deliveries/{id}/status",
        ) as resp:
            if resp.status_code == 200:
                self.state.current_status = resp.json()["data"]["status"]
            else:
                resp.failure(f"Read status failed: {resp.status_code} - {extract_error_detail(resp)}")

    def _notify(self, status):
        with self.client.post(
            "/webhooks/delivery-status",
            json=webhook_data(self.state.tracking_number, status),
            catch_response=True,
            name="POST /webhooks/delivery-status",
        ) as resp:
            if resp.status_code == 200:
                self.state.current_status = status
            else:
                resp.failure(f"Webhook failed: {resp.status_code} - {extract_error_detail(resp)}")


class DeliveryLifecycleUser(HttpUser):
    wait_time = between(0.5, 2)
    tasks = [DeliveryLifecycleJourney]
