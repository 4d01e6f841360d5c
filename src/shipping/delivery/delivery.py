"""Delivery aggregate — the shipment of one customer order.

Status set:
    PENDING, CONFIRMED, IN_TRANSIT, DELIVERED, CANCELLED

A delivery is created CONFIRMED (the label has already been issued). Its
status is only ever changed through ``update_status``, which overwrites
unconditionally: transition policy belongs to the workflows that call it,
never to the aggregate. Webhook reconciliation rejects replays and unknown
statuses; polling only writes when the provider reports something new.
"""

from datetime import UTC, datetime, timedelta
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, String, ValueObject

from shipping.delivery.events import DeliveryCreated, DeliveryStatusChanged
from shipping.delivery.identifiers import DeliveryId, OrderId, is_valid_delivery_id
from shipping.domain import shipping


class DeliveryStatus(Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    IN_TRANSIT = "IN_TRANSIT"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"

    @classmethod
    def values(cls) -> set[str]:
        return {status.value for status in cls}


POLLABLE_STATUSES = frozenset(
    {
        DeliveryStatus.PENDING,
        DeliveryStatus.CONFIRMED,
        DeliveryStatus.IN_TRANSIT,
    }
)


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@shipping.value_object(part_of="Delivery")
class ShippingAddress:
    street = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(max_length=100)
    zip_code = String(required=True, max_length=20)
    country = String(required=True, max_length=100)


@shipping.value_object(part_of="Delivery")
class CustomerInfo:
    name = String(required=True, max_length=200)
    email = String(max_length=254)
    phone = String(max_length=50)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@shipping.aggregate
class Delivery:
    id = Identifier(identifier=True)
    order_id = String(required=True, max_length=255)
    provider = String(required=True, max_length=50)
    tracking_number = String(required=True, max_length=100)
    status = String(
        max_length=20,
        choices=DeliveryStatus,
        default=DeliveryStatus.PENDING.value,
    )
    label_url = String(max_length=500)
    shipping_address = ValueObject(ShippingAddress)
    customer_info = ValueObject(CustomerInfo)
    estimated_delivery = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def id_must_be_a_delivery_id(self):
        if not is_valid_delivery_id(self.id):
            raise ValidationError({"id": [f"Invalid delivery id: {self.id!r}"]})

    # -------------------------------------------------------------------
    # Factory methods
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        delivery_id: DeliveryId,
        order_id: OrderId,
        provider: str,
        tracking_number: str,
        label_url: str,
        shipping_address: ShippingAddress,
        customer_info: CustomerInfo,
        status: DeliveryStatus = DeliveryStatus.CONFIRMED,
        estimated_delivery: datetime | None = None,
    ):
        """Register a delivery for which ``provider`` has issued a label."""
        now = datetime.now(UTC)
        delivery = cls(
            id=str(delivery_id),
            order_id=str(order_id),
            provider=provider,
            tracking_number=tracking_number,
            status=status.value,
            label_url=label_url,
            shipping_address=shipping_address,
            customer_info=customer_info,
            estimated_delivery=estimated_delivery,
            created_at=now,
            updated_at=now,
        )
        delivery.raise_(
            DeliveryCreated(
                delivery_id=delivery.id,
                order_id=delivery.order_id,
                provider=provider,
                tracking_number=tracking_number,
                status=status.value,
                created_at=now,
            )
        )
        return delivery

    @classmethod
    def from_primitives(cls, **data):
        """Rebuild a delivery from plain values, e.g. an external export.

        Identifiers are re-validated. ``updated_at`` reflects construction
        time, whatever the input carried.
        """
        delivery_id = DeliveryId.from_string(data["id"])
        order_id = OrderId(value=data["order_id"])
        status = data.get("status", DeliveryStatus.PENDING.value)
        if isinstance(status, DeliveryStatus):
            status = status.value
        return cls(
            id=str(delivery_id),
            order_id=str(order_id),
            provider=data["provider"],
            tracking_number=data["tracking_number"],
            status=status,
            label_url=data.get("label_url"),
            shipping_address=ShippingAddress(**data["shipping_address"]),
            customer_info=CustomerInfo(**data["customer_info"]),
            estimated_delivery=data.get("estimated_delivery"),
            created_at=data.get("created_at") or datetime.now(UTC),
            updated_at=datetime.now(UTC),
        )

    def to_primitives(self) -> dict:
        return {
            "id": self.id,
            "order_id": self.order_id,
            "provider": self.provider,
            "tracking_number": self.tracking_number,
            "status": self.status,
            "label_url": self.label_url,
            "shipping_address": _value_object_to_dict(self.shipping_address),
            "customer_info": _value_object_to_dict(self.customer_info),
            "estimated_delivery": self.estimated_delivery,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    # -------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------
    @property
    def delivery_id(self) -> DeliveryId:
        return DeliveryId(value=self.id)

    @property
    def current_status(self) -> DeliveryStatus:
        return DeliveryStatus(self.status)

    @property
    def is_pollable(self) -> bool:
        return self.current_status in POLLABLE_STATUSES

    # -------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------
    def update_status(self, status: DeliveryStatus | str) -> None:
        """Overwrite the status and refresh ``updated_at``.

        Accepts any status and any transition. ``updated_at`` always moves
        strictly forward, even when two updates land within the clock's
        resolution.
        """
        new_status = DeliveryStatus(status)
        previous_status = self.status
        now = _strictly_after(self.updated_at)

        self.status = new_status.value
        self.updated_at = now
        self.raise_(
            DeliveryStatusChanged(
                delivery_id=self.id,
                tracking_number=self.tracking_number,
                previous_status=previous_status,
                new_status=new_status.value,
                changed_at=now,
            )
        )


def _strictly_after(previous: datetime | None) -> datetime:
    now = datetime.now(UTC)
    if previous is None:
        return now
    if previous.tzinfo is None:
        previous = previous.replace(tzinfo=UTC)
    if now <= previous:
        now = previous + timedelta(microseconds=1)
    return now


def _value_object_to_dict(value_object) -> dict | None:
    if value_object is None:
        return None
    return value_object.to_dict()
