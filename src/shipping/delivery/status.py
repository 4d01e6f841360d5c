"""Delivery status — the single write path for status changes, and the read path.

Webhook reconciliation and tracking synchronization both end in
``apply_status_update``; the ``UpdateDeliveryStatus`` command exposes the
same operation to trusted callers.
"""

from dataclasses import dataclass
from datetime import datetime

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from shipping.delivery.delivery import Delivery, DeliveryStatus
from shipping.delivery.exceptions import DeliveryNotFoundError
from shipping.delivery.identifiers import DeliveryId
from shipping.domain import shipping

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class StatusChange:
    delivery_id: str
    previous_status: str
    new_status: str
    updated_at: datetime


@dataclass(frozen=True)
class DeliveryStatusView:
    delivery_id: str
    order_id: str
    provider: str
    tracking_number: str
    status: str
    label_url: str | None
    created_at: datetime
    updated_at: datetime


@shipping.command(part_of="Delivery")
class UpdateDeliveryStatus:
    """Overwrite the status of a delivery. Every transition is accepted."""

    delivery_id = Identifier(required=True)
    status = String(required=True, max_length=20, choices=DeliveryStatus)


@shipping.command_handler(part_of=Delivery)
class DeliveryStatusHandler:
    @handle(UpdateDeliveryStatus)
    def update_status(self, command):
        return apply_status_update(command.delivery_id, command.status)


def apply_status_update(delivery_id, status: DeliveryStatus | str) -> StatusChange:
    """Load, update and persist one delivery.

    Raises ``DeliveryNotFoundError`` when no delivery has ``delivery_id``.
    """
    repo = current_domain.repository_for(Delivery)
    delivery = repo.find_by_id(delivery_id)
    if delivery is None:
        raise DeliveryNotFoundError(f"Delivery {delivery_id} not found")

    previous_status = delivery.status
    delivery.update_status(status)
    repo.save(delivery)

    logger.info(
        "Delivery status updated",
        delivery_id=delivery.id,
        tracking_number=delivery.tracking_number,
        previous_status=previous_status,
        new_status=delivery.status,
    )
    return StatusChange(
        delivery_id=delivery.id,
        previous_status=previous_status,
        new_status=delivery.status,
        updated_at=delivery.updated_at,
    )


def get_delivery_status(delivery_id: str) -> DeliveryStatusView:
    delivery_id = DeliveryId.from_string(delivery_id)
    delivery = current_domain.repository_for(Delivery).find_by_id(delivery_id)
    if delivery is None:
        raise DeliveryNotFoundError(f"Delivery {delivery_id} not found")

    return DeliveryStatusView(
        delivery_id=delivery.id,
        order_id=delivery.order_id,
        provider=delivery.provider,
        tracking_number=delivery.tracking_number,
        status=delivery.status,
        label_url=delivery.label_url,
        created_at=delivery.created_at,
        updated_at=delivery.updated_at,
    )
