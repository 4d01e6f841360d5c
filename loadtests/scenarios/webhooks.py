"""Webhook replay load scenario.

Providers retry notifications aggressively. Every user creates one delivery
and then hammers the webhook with the same status; only the first call may
change anything, every replay must come back 200 with ``noChange``.
"""

import random

from locust import HttpUser, between, task

from loadtests.data_generators import delivery_data, webhook_data
from loadtests.helpers.response import extract_error_detail


class WebhookReplayUser(HttpUser):
    wait_time = between(0.05, 0.3)

    def on_start(self):
        self.tracking_number = None
        self.status = random.choice(["IN_TRANSIT", "DELIVERED"])
        resp = self.client.post("/deliveries", json=delivery_data(), name="POST /deliveries")
        if resp.status_code == 201:
            self.tracking_number = resp.json()["data"]["trackingNumber"]

    @task
    def replay(self):
        if self.tracking_number is None:
            return
        with self.client.post(
            "/webhooks/delivery-status",
            json=webhook_data(self.tracking_number, self.status),
            catch_response=True,
            name="POST /webhooks/delivery-status [replay]",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Replay failed: {resp.status_code} - {extract_error_detail(resp)}")
