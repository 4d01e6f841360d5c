"""Per-user state tracking for Locust load test scenarios."""

from dataclasses import dataclass


@dataclass
class DeliveryState:
    """Tracks one simulated delivery from creation to its last webhook."""

    delivery_id: str | None = None
    order_id: str | None = None
    tracking_number: str | None = None
    provider: str | None = None
    current_status: str = "CONFIRMED"
