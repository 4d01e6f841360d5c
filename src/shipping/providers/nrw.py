"""NRW — simulated polling carrier.

NRW cannot call us back, so its deliveries are kept up to date by the
tracking poller. Availability, label and tracking failures and the reported
statuses are all randomized.
"""

import random
from datetime import UTC, datetime, timedelta

from shipping.delivery.delivery import CustomerInfo, DeliveryStatus, ShippingAddress
from shipping.delivery.exceptions import ProviderUnavailableError
from shipping.providers.port import PullProvider, ShippingLabel, TrackingStatus
from shipping.providers.simulation import SimulatedApi


class NRWShippingProvider(PullProvider):
    AVAILABILITY = 0.90
    LABEL_FAILURE_RATE = 0.05
    TRACKING_FAILURE_RATE = 0.02

    def __init__(self, rng: random.Random | None = None, latency: tuple[float, float] = (0.01, 0.2)):
        self._api = SimulatedApi(rng=rng, latency=latency)
        self._sequence = 0

    def name(self) -> str:
        return "NRW"

    async def is_available(self) -> bool:
        await self._api.delay()
        return not self._api.happens(1 - self.AVAILABILITY)

    async def generate_label(
        self,
        order_id: str,
        shipping_address: ShippingAddress,
        customer_info: CustomerInfo,
    ) -> ShippingLabel:
        await self._api.delay()
        if self._api.happens(self.LABEL_FAILURE_RATE):
            raise ProviderUnavailableError("NRW API temporarily unavailable", provider=self.name())

        tracking_number = self._next_tracking_number()
        days = 2 + self._api.rng.randrange(3)
        return ShippingLabel(
            provider=self.name(),
            tracking_number=tracking_number,
            label_url=f"https://api.nrw-shipping.com/labels/{tracking_number}.pdf",
            estimated_delivery=datetime.now(UTC) + timedelta(days=days),
        )

    async def get_tracking_status(self, tracking_number: str) -> TrackingStatus:
        await self._api.delay()
        if self._api.happens(self.TRACKING_FAILURE_RATE):
            raise ProviderUnavailableError("NRW tracking API temporarily unavailable", provider=self.name())

        roll = self._api.rng.random()
        if roll < 0.3:
            status = DeliveryStatus.CONFIRMED
        elif roll < 0.7:
            status = DeliveryStatus.IN_TRANSIT
        else:
            status = DeliveryStatus.DELIVERED

        return TrackingStatus(
            tracking_number=tracking_number,
            status=status,
            last_updated=datetime.now(UTC),
            provider=self.name(),
        )

    def _next_tracking_number(self) -> str:
        # The sequence keeps numbers unique within a millisecond
        self._sequence += 1
        millis = int(datetime.now(UTC).timestamp() * 1000)
        return f"NRW{millis}{self._sequence:04d}{self._api.tracking_suffix()}"
