"""TLS — simulated webhook carrier.

TLS pushes status changes to ``/webhooks/delivery-status``; it offers no
tracking query.
"""

import random
from datetime import UTC, datetime, timedelta

from shipping.delivery.delivery import CustomerInfo, ShippingAddress
from shipping.delivery.exceptions import ProviderUnavailableError
from shipping.providers.port import PushProvider, ShippingLabel
from shipping.providers.simulation import SimulatedApi


class TLSShippingProvider(PushProvider):
    AVAILABILITY = 0.85
    LABEL_FAILURE_RATE = 0.08

    def __init__(self, rng: random.Random | None = None, latency: tuple[float, float] = (0.01, 0.2)):
        self._api = SimulatedApi(rng=rng, latency=latency)
        self._sequence = 0

    def name(self) -> str:
        return "TLS"

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
            raise ProviderUnavailableError("TLS API temporarily unavailable", provider=self.name())

        self._sequence += 1
        millis = int(datetime.now(UTC).timestamp() * 1000)
        tracking_number = f"TLS{millis}{self._sequence:04d}{self._api.tracking_suffix()}"
        days = 1 + self._api.rng.randrange(4)
        return ShippingLabel(
            provider=self.name(),
            tracking_number=tracking_number,
            label_url=f"https://api.tls-logistics.com/shipping-labels/{tracking_number}.pdf",
            estimated_delivery=datetime.now(UTC) + timedelta(days=days),
        )
