"""Fake providers — deterministic carriers for testing and development.

Both fakes succeed by default, generate ``FAKE-`` tracking numbers and record
every call. Configure availability and failures with ``configure()``.
``FakePullProvider`` reports whatever status was last set for a tracking
number (CONFIRMED otherwise).
"""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

from shipping.delivery.delivery import CustomerInfo, DeliveryStatus, ShippingAddress
from shipping.delivery.exceptions import ProviderUnavailableError
from shipping.providers.port import PullProvider, PushProvider, ShippingLabel, TrackingStatus


class _FakeBehaviour:
    def __init__(self, provider_name: str):
        self._name = provider_name
        self.available = True
        self.should_succeed = True
        self.failure_reason = "Provider unavailable"
        self.label_calls: list[str] = []

    def configure(
        self,
        available: bool = True,
        should_succeed: bool = True,
        failure_reason: str = "Provider unavailable",
    ):
        """Configure the fake provider behavior for testing."""
        self.available = available
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def name(self) -> str:
        return self._name

    async def is_available(self) -> bool:
        return self.available

    async def generate_label(
        self,
        order_id: str,
        shipping_address: ShippingAddress,
        customer_info: CustomerInfo,
    ) -> ShippingLabel:
        self.label_calls.append(order_id)
        if not self.should_succeed:
            raise ProviderUnavailableError(self.failure_reason, provider=self._name)

        tracking_number = f"FAKE-{uuid4().hex[:12].upper()}"
        return ShippingLabel(
            provider=self._name,
            tracking_number=tracking_number,
            label_url=f"https://fake-carrier.example.com/labels/{tracking_number}.pdf",
            estimated_delivery=datetime.now(UTC) + timedelta(days=3),
        )


class FakePushProvider(_FakeBehaviour, PushProvider):
    """Accepts any webhook signature until ``expected_signature`` is set."""

    def __init__(self, name: str = "FAKE-PUSH"):
        super().__init__(name)
        self.expected_signature: str | None = None

    def verify_webhook_signature(self, payload: str, signature: str | None) -> bool:
        if self.expected_signature is None:
            return True
        return signature == self.expected_signature


class FakePullProvider(_FakeBehaviour, PullProvider):
    def __init__(self, name: str = "FAKE-PULL"):
        super().__init__(name)
        self.statuses: dict[str, DeliveryStatus] = {}
        self.failing: set[str] = set()
        self.tracking_calls: list[str] = []

    def set_status(self, tracking_number: str, status: DeliveryStatus) -> None:
        self.statuses[tracking_number] = status

    def fail_tracking(self, tracking_number: str) -> None:
        """Make tracking queries for ``tracking_number`` raise."""
        self.failing.add(tracking_number)

    async def get_tracking_status(self, tracking_number: str) -> TrackingStatus:
        self.tracking_calls.append(tracking_number)
        if not self.should_succeed or tracking_number in self.failing:
            raise ProviderUnavailableError(self.failure_reason, provider=self._name)

        return TrackingStatus(
            tracking_number=tracking_number,
            status=self.statuses.get(tracking_number, DeliveryStatus.CONFIRMED),
            last_updated=datetime.now(UTC),
            provider=self._name,
        )
