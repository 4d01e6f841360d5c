"""Delivery id providers.

``get_id_provider()`` returns the configured provider (singleton). The
strategy is read from ``DELIVERY_ID_STRATEGY``: ``uuid`` (default) or
``objectid`` for document-store style 24-character hex ids.
"""

import os
import secrets
import time
from abc import ABC, abstractmethod
from uuid import uuid4

from shipping.delivery.identifiers import DeliveryId


class IdProvider(ABC):
    @abstractmethod
    def new_delivery_id(self) -> DeliveryId:
        """Return a fresh, globally unique delivery id."""
        ...


class UuidIdProvider(IdProvider):
    def new_delivery_id(self) -> DeliveryId:
        return DeliveryId.from_string(str(uuid4()))


class ObjectIdProvider(IdProvider):
    """24-char hex ids: a 4-byte big-endian timestamp followed by 8 random bytes."""

    def new_delivery_id(self) -> DeliveryId:
        timestamp = int(time.time()).to_bytes(4, "big")
        return DeliveryId.from_string((timestamp + secrets.token_bytes(8)).hex())


_PROVIDERS = {
    "uuid": UuidIdProvider,
    "objectid": ObjectIdProvider,
}

_id_provider: IdProvider | None = None


def get_id_provider() -> IdProvider:
    global _id_provider
    if _id_provider is None:
        strategy = os.environ.get("DELIVERY_ID_STRATEGY", "uuid").lower()
        if strategy not in _PROVIDERS:
            raise ValueError(f"Unknown delivery id strategy: {strategy}")
        _id_provider = _PROVIDERS[strategy]()
    return _id_provider


def reset_id_provider() -> None:
    """Forget the configured provider (useful for testing)."""
    global _id_provider
    _id_provider = None
