"""FastAPI routes for the Shipping domain."""

import structlog
from fastapi import APIRouter, Header
from protean.utils.globals import current_domain

from shipping.api.schemas import (
    CreateDeliveryRequest,
    CreateDeliveryResponse,
    DeliveryLabelResponse,
    DeliveryStatusResponse,
    DeliveryStatusWebhookRequest,
    ErrorResponse,
    GetDeliveryStatusResponse,
    StatusChangeResponse,
    UpdateDeliveryStatusRequest,
    WebhookResponse,
)
from shipping.delivery.creation import DeliveryCreation
from shipping.delivery.exceptions import NoStatusChangeError
from shipping.delivery.identifiers import DeliveryId
from shipping.delivery.ids import get_id_provider
from shipping.delivery.status import UpdateDeliveryStatus, get_delivery_status
from shipping.delivery.webhook import ProcessDeliveryWebhook
from shipping.providers import get_selector

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Delivery Router
# ---------------------------------------------------------------------------
delivery_router = APIRouter(prefix="/deliveries", tags=["deliveries"])


@delivery_router.post(
    "",
    status_code=201,
    response_model=CreateDeliveryResponse,
    responses={409: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def create_delivery(body: CreateDeliveryRequest) -> CreateDeliveryResponse:
    """Create a delivery for an order through an available shipping provider."""
    creation = DeliveryCreation(get_selector(), get_id_provider())
    label = await creation.create(
        order_id=body.order_id,
        shipping_address=body.shipping_address.model_dump(),
        customer_info=body.customer_info.model_dump(),
    )
    return CreateDeliveryResponse(data=DeliveryLabelResponse(**vars(label)))


@delivery_router.get(
    "/{delivery_id}/status",
    response_model=GetDeliveryStatusResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_status(delivery_id: str) -> GetDeliveryStatusResponse:
    """Return the current status of a delivery."""
    view = get_delivery_status(delivery_id)
    return GetDeliveryStatusResponse(data=DeliveryStatusResponse(**vars(view)))


@delivery_router.put(
    "/{delivery_id}/status",
    response_model=StatusChangeResponse,
    responses={404: {"model": ErrorResponse}},
)
async def update_status(delivery_id: str, body: UpdateDeliveryStatusRequest) -> StatusChangeResponse:
    """Overwrite the status of a delivery. Intended for trusted internal callers."""
    command = UpdateDeliveryStatus(
        delivery_id=str(DeliveryId.from_string(delivery_id)),
        status=body.status.value,
    )
    change = current_domain.process(command, asynchronous=False)
    return StatusChangeResponse(**vars(change))


# ---------------------------------------------------------------------------
# Webhook Router
# ---------------------------------------------------------------------------
webhook_router = APIRouter(prefix="/webhooks", tags=["webhooks"])


@webhook_router.post(
    "/delivery-status",
    response_model=WebhookResponse,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def delivery_status_webhook(
    body: DeliveryStatusWebhookRequest,
    x_webhook_signature: str | None = Header(default=None),
) -> WebhookResponse:
    """Process a delivery status notification pushed by a shipping provider."""
    signature = body.signature or x_webhook_signature
    command = ProcessDeliveryWebhook(
        tracking_number=body.tracking_number,
        status=body.status,
        timestamp=body.timestamp,
        signature=signature,
    )
    try:
        outcome = current_domain.process(command, asynchronous=False)
    except NoStatusChangeError:
        return WebhookResponse(
            message="Delivery status unchanged",
            tracking_number=body.tracking_number,
            updated_status=body.status,
            no_change=True,
        )

    return WebhookResponse(
        message="Delivery status updated",
        delivery_id=outcome.delivery_id,
        order_id=outcome.order_id,
        tracking_number=outcome.tracking_number,
        provider=outcome.provider,
        previous_status=outcome.previous_status,
        updated_status=outcome.new_status,
    )
