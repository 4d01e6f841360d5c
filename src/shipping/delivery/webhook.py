"""Webhook reconciliation — apply a provider's status notification.

Notifications are matched by tracking number and compared literally against
the known status values. A notification that repeats the current status is
rejected with ``NoStatusChangeError``, which absorbs provider replays.

When the delivery was labelled by a push provider, that provider verifies
the signature before anything else is looked at.
"""

import json
from dataclasses import dataclass

import structlog
from protean import handle
from protean.fields import Text
from protean.utils.globals import current_domain

from shipping.delivery.delivery import Delivery, DeliveryStatus
from shipping.delivery.exceptions import (
    DeliveryNotFoundError,
    InvalidSignatureError,
    InvalidStatusError,
    NoStatusChangeError,
)
from shipping.delivery.status import apply_status_update
from shipping.domain import shipping
from shipping.providers import get_selector
from shipping.providers.port import PushProvider

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class WebhookOutcome:
    delivery_id: str
    order_id: str
    tracking_number: str
    provider: str
    previous_status: str
    new_status: str


def signature_payload(tracking_number: str, status: str, timestamp: str | None) -> str:
    """Canonical text a provider signs: the notification without its signature."""
    return json.dumps(
        {"status": status, "timestamp": timestamp, "trackingNumber": tracking_number},
        sort_keys=True,
    )


@shipping.command(part_of="Delivery")
class ProcessDeliveryWebhook:
    """Status notification pushed by a shipping provider.

    Fields are unbounded text: unknown tracking numbers and statuses are
    rejected by the handler, not by field validation.
    """

    tracking_number = Text(required=True)
    status = Text(required=True)
    timestamp = Text()
    signature = Text()


@shipping.command_handler(part_of=Delivery)
class DeliveryWebhookHandler:
    @handle(ProcessDeliveryWebhook)
    def process_webhook(self, command):
        delivery = current_domain.repository_for(Delivery).find_by_tracking_number(command.tracking_number)
        if delivery is None:
            raise DeliveryNotFoundError(f"Delivery with tracking number {command.tracking_number} not found")

        _verify_signature(delivery, command)

        if command.status not in DeliveryStatus.values():
            raise InvalidStatusError(f"Invalid status: {command.status}")

        if command.status == delivery.status:
            logger.info(
                "Webhook carried no status change",
                tracking_number=command.tracking_number,
                status=command.status,
            )
            raise NoStatusChangeError(f"Delivery already has status {command.status}")

        change = apply_status_update(delivery.id, command.status)
        return WebhookOutcome(
            delivery_id=change.delivery_id,
            order_id=delivery.order_id,
            tracking_number=delivery.tracking_number,
            provider=delivery.provider,
            previous_status=change.previous_status,
            new_status=change.new_status,
        )


def _verify_signature(delivery: Delivery, command) -> None:
    provider = get_selector().find(delivery.provider)
    if not isinstance(provider, PushProvider):
        return

    payload = signature_payload(command.tracking_number, command.status, command.timestamp)
    if not provider.verify_webhook_signature(payload, command.signature):
        logger.warning(
            "Webhook signature rejected",
            tracking_number=command.tracking_number,
            provider=delivery.provider,
        )
        raise InvalidSignatureError("Invalid webhook signature")
