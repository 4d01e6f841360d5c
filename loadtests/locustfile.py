"""Shipping load testing — Locust entry point.

Usage:
    # All scenarios (web UI):
    locust -f loadtests/locustfile.py

    # Webhook replay storm only:
    locust -f loadtests/locustfile.py WebhookReplayUser

    # Headless (CI mode):
    locust -f loadtests/locustfile.py DeliveryLifecycleUser --headless \
           -u 50 -r 5 -t 300s --csv=results/loadtest

Run the target with SHIPPING_PROVIDERS=fake-pull,fake-push so label
generation never fails at random.
"""

import logging
import time

from locust import events

# Import all user classes so Locust discovers them
from loadtests.helpers.response import extract_error_detail
from loadtests.scenarios.delivery import DeliveryLifecycleUser  # noqa: F401
from loadtests.scenarios.webhooks import WebhookReplayUser  # noqa: F401

logger = logging.getLogger("loadtest")


@events.request.add_listener
def on_request(request_type, name, response, exception, **_kw):
    """Log error details for every failed request."""
    if exception:
        logger.error("[EXCEPTION] %s %s: %s", request_type, name, exception)
    elif response is not None and response.status_code >= 400:
        detail = extract_error_detail(response)
        logger.error("[%s] %s %s: %s", response.status_code, request_type, name, detail)


@events.test_start.add_listener
def on_test_start(environment, **_kwargs):
    print(f"\n[LOADTEST] Started at {time.strftime('%H:%M:%S')}")
    print(f"[LOADTEST] Target host: {environment.host}\n")


@events.test_stop.add_listener
def on_test_stop(environment, **_kwargs):
    """Report the poller state of the target when the test ends."""
    print(f"\n[LOADTEST] Stopped at {time.strftime('%H:%M:%S')}")
    try:
        import requests

        health = requests.get(f"{environment.host}/health", timeout=5).json()
        print(f"[LOADTEST] Poller: {health.get('poller')}\n")
    except Exception as e:
        print(f"[LOADTEST] Could not fetch health: {e}\n")
