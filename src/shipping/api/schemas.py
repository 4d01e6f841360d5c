"""Pydantic API schemas for the Shipping domain.

These are the external API contracts, separate from domain commands. Field
names are camelCase on the wire and snake_case in Python.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from shipping.delivery.delivery import DeliveryStatus


class _Schema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------
class ShippingAddressRequest(_Schema):
    street: str
    city: str
    state: str | None = None
    zip_code: str
    country: str


class CustomerInfoRequest(_Schema):
    name: str
    email: str | None = None
    phone: str | None = None


class CreateDeliveryRequest(_Schema):
    order_id: str
    shipping_address: ShippingAddressRequest
    customer_info: CustomerInfoRequest


class UpdateDeliveryStatusRequest(_Schema):
    status: DeliveryStatus


class DeliveryStatusWebhookRequest(_Schema):
    tracking_number: str
    # Kept as a plain string: unknown statuses are rejected by the domain
    status: str
    timestamp: str | None = None
    signature: str | None = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------
class DeliveryLabelResponse(_Schema):
    delivery_id: str
    order_id: str
    provider: str
    label_url: str
    tracking_number: str
    estimated_delivery: datetime
    status: str


class CreateDeliveryResponse(_Schema):
    success: bool = True
    data: DeliveryLabelResponse


class DeliveryStatusResponse(_Schema):
    delivery_id: str
    order_id: str
    provider: str
    tracking_number: str
    status: str
    label_url: str | None = None
    created_at: datetime
    updated_at: datetime


class GetDeliveryStatusResponse(_Schema):
    success: bool = True
    data: DeliveryStatusResponse


class StatusChangeResponse(_Schema):
    success: bool = True
    delivery_id: str
    previous_status: str
    new_status: str
    updated_at: datetime


class WebhookResponse(_Schema):
    success: bool = True
    message: str
    delivery_id: str | None = None
    order_id: str | None = None
    tracking_number: str
    provider: str | None = None
    previous_status: str | None = None
    updated_status: str | None = None
    no_change: bool = False


class ErrorResponse(_Schema):
    error: str
    message: str
