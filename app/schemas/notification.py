# app/schemas/notification.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


# Los payloads son permisivos a propósito: las reglas de negocio viven en
# email_service.validate_* para que el servicio las aplique también fuera de HTTP.

class OrderOwner(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None


class OrderProduct(BaseModel):
    name: str
    price: float
    quantity: int = 1


class OrderConfirmation(BaseModel):
    owner: Optional[OrderOwner] = None
    products: List[OrderProduct] = Field(default_factory=list)
    order_number: Optional[str] = None
    purchased_at: Optional[datetime] = None
    total: Optional[float] = None


class EmailRequest(BaseModel):
    to: Optional[str] = None
    subject: Optional[str] = None
    message: Optional[str] = None


class UserEmailRequest(BaseModel):
    subject: str = Field(..., min_length=1, max_length=200)
    body: str = Field(..., min_length=1, max_length=5000)


class NotificationAccepted(BaseModel):
    detail: str
    recipient: str
