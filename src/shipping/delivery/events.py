"""Delivery domain events — immutable facts about delivery state changes."""

from protean.fields import DateTime, Identifier, String

from shipping.domain import shipping


@shipping.event(part_of="Delivery")
class DeliveryCreated:
    """A shipping label was issued and the delivery was registered."""

    __version__ = 1

    delivery_id = Identifier(required=True)
    order_id = String(required=True)
    provider = String(required=True)
    tracking_number = String(required=True)
    status = String(required=True)
    created_at = DateTime(required=True)


@shipping.event(part_of="Delivery")
class DeliveryStatusChanged:
    """The delivery status was overwritten."""

    __version__ = 1

    delivery_id = Identifier(required=True)
    tracking_number = String(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)
