from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import get_enrichment_gateway
from app.schemas.notification import (
    EmailRequest,
    NotificationAccepted,
    OrderConfirmation,
    UserEmailRequest,
)
from app.services import email_service
from app.services.enrichment import EnrichmentGateway

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.post(
    "/order-confirmation",
    response_model=NotificationAccepted,
    status_code=status.HTTP_202_ACCEPTED,
)
async def send_order_confirmation(payload: OrderConfirmation):
    recipient = await email_service.notify_order_confirmation(payload)
    return NotificationAccepted(detail="Order confirmation sent", recipient=recipient)


@router.post(
    "/purchase",
    response_model=NotificationAccepted,
    status_code=status.HTTP_202_ACCEPTED,
)
async def send_purchase_confirmation(
    user_id: int = Query(..., alias="userId"),
    product_id: int = Query(..., alias="productId"),
    gateway: EnrichmentGateway = Depends(get_enrichment_gateway),
):
    recipient = await email_service.notify_single_purchase(gateway, user_id, product_id)
    return NotificationAccepted(detail="Purchase confirmation sent", recipient=recipient)


@router.post(
    "/email",
    response_model=NotificationAccepted,
    status_code=status.HTTP_202_ACCEPTED,
)
async def send_email(payload: EmailRequest):
    recipient = await email_service.send_plain_email(payload)
    return NotificationAccepted(detail="Email sent", recipient=recipient)


@router.post(
    "/users/{user_id}/email",
    response_model=NotificationAccepted,
    status_code=status.HTTP_202_ACCEPTED,
)
async def send_email_to_user(
    user_id: int,
    payload: UserEmailRequest,
    gateway: EnrichmentGateway = Depends(get_enrichment_gateway),
):
    recipient = await email_service.send_to_user(gateway, user_id, payload.subject, payload.body)
    return NotificationAccepted(detail="Email sent", recipient=recipient)
