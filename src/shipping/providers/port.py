"""Shipping provider port — the interface every carrier integration implements.

Providers come in two kinds, fixed per class:

- ``PushProvider`` reports status changes to us through webhooks.
- ``PullProvider`` has to be asked; only this kind exposes
  ``get_tracking_status``, so the polling engine never needs to probe for
  the capability at runtime.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from shipping.delivery.delivery import CustomerInfo, DeliveryStatus, ShippingAddress


class ProviderType(Enum):
    PUSH = "WEBHOOK"
    PULL = "POLLING"


@dataclass(frozen=True)
class ShippingLabel:
    provider: str
    tracking_number: str
    label_url: str
    estimated_delivery: datetime


@dataclass(frozen=True)
class TrackingStatus:
    """A provider's view of one shipment. Never persisted as such."""

    tracking_number: str
    status: DeliveryStatus
    last_updated: datetime
    provider: str


class ShippingProvider(ABC):
    """Common contract of push and pull providers."""

    @abstractmethod
    def name(self) -> str:
        """Stable provider identifier, stored on every delivery it labels."""
        ...

    @abstractmethod
    def provider_type(self) -> ProviderType: ...

    @abstractmethod
    async def is_available(self) -> bool:
        """Report current capacity. May raise; callers treat that as unavailable."""
        ...

    @abstractmethod
    async def generate_label(
        self,
        order_id: str,
        shipping_address: ShippingAddress,
        customer_info: CustomerInfo,
    ) -> ShippingLabel:
        """Issue a shipping label with a tracking number unique to this call.

        Raises:
            ProviderUnavailableError: the provider could not issue a label.
        """
        ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name()}>"


class PushProvider(ShippingProvider):
    """Provider that notifies status changes through webhooks."""

    def provider_type(self) -> ProviderType:
        return ProviderType.PUSH

    def verify_webhook_signature(self, payload: str, signature: str | None) -> bool:
        """Check that a webhook callback is authentic. Accepts everything by default."""
        return True


class PullProvider(ShippingProvider):
    """Provider whose tracking state has to be polled."""

    def provider_type(self) -> ProviderType:
        return ProviderType.PULL

    @abstractmethod
    async def get_tracking_status(self, tracking_number: str) -> TrackingStatus:
        """Query the provider for the current status of a shipment.

        Raises:
            ProviderUnavailableError: the tracking API could not be reached.
        """
        ...
