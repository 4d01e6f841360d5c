"""Delivery creation — label issuance and registration.

``DeliveryCreation`` talks to the carriers (async) and then hands the
resulting delivery to the domain through the ``RegisterDelivery`` command.
Nothing is persisted unless a label was issued.
"""

import json
from dataclasses import dataclass
from datetime import datetime

import structlog
from protean import handle
from protean.fields import DateTime, Identifier, String, Text
from protean.utils.globals import current_domain

from shipping.delivery.delivery import CustomerInfo, Delivery, DeliveryStatus, ShippingAddress
from shipping.delivery.exceptions import DuplicateOrderError
from shipping.delivery.identifiers import OrderId
from shipping.delivery.ids import IdProvider
from shipping.domain import shipping
from shipping.providers.selector import ProviderSelector

logger = structlog.get_logger(__name__)


@shipping.command(part_of="Delivery")
class RegisterDelivery:
    """Record a delivery for which a provider has issued a label."""

    delivery_id = Identifier(required=True)
    order_id = String(required=True, max_length=255)
    provider = String(required=True, max_length=50)
    tracking_number = String(required=True, max_length=100)
    label_url = String(max_length=500)
    estimated_delivery = DateTime()
    shipping_address = Text(required=True)  # JSON dict
    customer_info = Text(required=True)  # JSON dict


@shipping.command_handler(part_of=Delivery)
class RegisterDeliveryHandler:
    @handle(RegisterDelivery)
    def register_delivery(self, command):
        address = json.loads(command.shipping_address)
        customer = json.loads(command.customer_info)
        delivery = Delivery.create(
            delivery_id=command.delivery_id,
            order_id=command.order_id,
            provider=command.provider,
            tracking_number=command.tracking_number,
            label_url=command.label_url,
            shipping_address=ShippingAddress(**address),
            customer_info=CustomerInfo(**customer),
            estimated_delivery=command.estimated_delivery,
        )
        current_domain.repository_for(Delivery).save(delivery)
        return str(delivery.id)


@dataclass(frozen=True)
class DeliveryLabel:
    delivery_id: str
    order_id: str
    provider: str
    label_url: str
    tracking_number: str
    estimated_delivery: datetime
    status: str


class DeliveryCreation:
    """Create a delivery for an order through one available provider."""

    def __init__(self, selector: ProviderSelector, id_provider: IdProvider):
        self._selector = selector
        self._id_provider = id_provider

    async def create(self, order_id: str, shipping_address: dict, customer_info: dict) -> DeliveryLabel:
        """Issue a label and register the delivery.

        Raises:
            ValidationError: the order id, address or customer is malformed.
            DuplicateOrderError: the order already has a delivery.
            NoProviderAvailableError: no provider reported capacity.
            ProviderUnavailableError: the chosen provider failed to issue a label.
        """
        order = OrderId(value=order_id)
        address = ShippingAddress(**shipping_address)
        customer = CustomerInfo(**customer_info)

        repo = current_domain.repository_for(Delivery)
        if repo.find_by_order_id(order) is not None:
            raise DuplicateOrderError(f"Delivery already exists for order {order}")

        provider = await self._selector.select_provider()
        label = await provider.generate_label(str(order), address, customer)

        delivery_id = self._id_provider.new_delivery_id()
        current_domain.process(
            RegisterDelivery(
                delivery_id=str(delivery_id),
                order_id=str(order),
                provider=label.provider,
                tracking_number=label.tracking_number,
                label_url=label.label_url,
                estimated_delivery=label.estimated_delivery,
                shipping_address=json.dumps(address.to_dict()),
                customer_info=json.dumps(customer.to_dict()),
            ),
            asynchronous=False,
        )

        logger.info(
            "Delivery created",
            delivery_id=str(delivery_id),
            order_id=str(order),
            provider=label.provider,
            tracking_number=label.tracking_number,
        )
        return DeliveryLabel(
            delivery_id=str(delivery_id),
            order_id=str(order),
            provider=label.provider,
            label_url=label.label_url,
            tracking_number=label.tracking_number,
            estimated_delivery=label.estimated_delivery,
            status=DeliveryStatus.CONFIRMED.value,
        )
