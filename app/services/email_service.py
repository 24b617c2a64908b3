# app/services/email_service.py
"""Checkout notifications: compose confirmation emails and hand them to delivery."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi.concurrency import run_in_threadpool

from app.core.config import settings
from app.core.logging import get_logger
from app.schemas.notification import EmailRequest, OrderConfirmation
from app.services import email_delivery
from app.services.enrichment import EnrichmentGateway
from app.services.exceptions import DomainValidationError
from app.utils.validators import is_valid_email_format

logger = get_logger(__name__)

SINGLE_PURCHASE_SUBJECT = "¡Compra realizada con éxito!"


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


async def _send(to_email: str, subject: str, body: str) -> None:
    # smtplib bloquea; lo sacamos del event loop.
    await run_in_threadpool(email_delivery.deliver_email, to_email, subject, body)
    logger.info("Notification dispatched", extra={"to": to_email, "subject": subject})


def validate_email_request(request: EmailRequest) -> None:
    if _is_blank(request.to) or _is_blank(request.subject) or _is_blank(request.message):
        raise DomainValidationError("All fields are required (to, subject, message)")
    if not is_valid_email_format(request.to):
        raise DomainValidationError("Invalid email format")


def validate_order_confirmation(order: OrderConfirmation) -> None:
    if order.owner is None:
        raise DomainValidationError("Order owner is required")
    if _is_blank(order.owner.name):
        raise DomainValidationError("Order owner name is required")
    if not is_valid_email_format(order.owner.email):
        raise DomainValidationError("Invalid owner email format")
    if not order.products:
        raise DomainValidationError("Order must contain at least one product")
    if _is_blank(order.order_number):
        raise DomainValidationError("Order number is required")
    if order.total is None or order.total <= 0:
        raise DomainValidationError("Order total must be greater than zero")


def compose_order_confirmation(order: OrderConfirmation) -> tuple[str, str]:
    purchased_at = order.purchased_at or datetime.now(timezone.utc)
    subject = f"Confirmación de compra - Pedido #{order.order_number}"

    lines = [
        f"Hola {order.owner.name},",
        "",
        "Gracias por tu compra. Tu pedido ha sido confirmado.",
        "",
        "Detalles del pedido:",
        f"Número de pedido: {order.order_number}",
        f"Fecha: {purchased_at:%Y-%m-%d %H:%M}",
        "",
        "Productos comprados:",
    ]
    for product in order.products:
        if product.quantity > 1:
            lines.append(f"- {product.name} x{product.quantity} - ${product.price:.2f}")
        else:
            lines.append(f"- {product.name} - ${product.price:.2f}")
    lines += [
        "",
        f"Total de la compra: ${order.total:.2f}",
        "",
        f"Gracias por elegir {settings.PROJECT_NAME}.",
        "Te mantendremos informado sobre el estado de tu pedido.",
    ]
    return subject, "\n".join(lines)


async def notify_order_confirmation(order: OrderConfirmation) -> str:
    """Validate an assembled order and email its confirmation. Returns the recipient."""
    validate_order_confirmation(order)
    subject, body = compose_order_confirmation(order)
    recipient = order.owner.email.strip()
    await _send(recipient, subject, body)
    return recipient


async def notify_single_purchase(gateway: EnrichmentGateway, user_id: int, product_id: int) -> str:
    user = await gateway.resolve_user(user_id)
    product = await gateway.resolve_product(product_id)

    body = (
        f"Hola {user.name}\n\n"
        "Tu compra fue exitosa.\n\n"
        f"Producto: {product.name}\n"
        f"Precio: ${product.price:.2f}\n\n"
        "Gracias por tu compra."
    )
    await _send(user.email, SINGLE_PURCHASE_SUBJECT, body)
    return user.email


async def send_plain_email(request: EmailRequest) -> str:
    validate_email_request(request)
    recipient = request.to.strip()
    await _send(recipient, request.subject, request.message)
    return recipient


async def send_to_user(gateway: EnrichmentGateway, user_id: int, subject: str, body: str) -> str:
    user = await gateway.resolve_user(user_id)
    if not is_valid_email_format(user.email):
        raise DomainValidationError(f"User {user_id} has an invalid email address")
    await _send(user.email, subject, f"Hola {user.name}\n{body}")
    return user.email
