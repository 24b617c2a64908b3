# app/schemas/cart.py
from __future__ import annotations
from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from app.domain.enums import CartStatus
from app.schemas.enrichment import EnrichedProduct, EnrichedUser


class CartItemRead(BaseModel):
    id: int
    cart_id: int
    product_id: int
    quantity: int
    unit_price: float
    line_subtotal: float

    model_config = ConfigDict(from_attributes=True)


class CartRead(BaseModel):
    id: int
    owner_id: int
    status: CartStatus
    created_at: datetime
    total: float

    items: List[CartItemRead] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class CartLineDetails(BaseModel):
    item: CartItemRead
    product: EnrichedProduct


class CartDetails(BaseModel):
    """Cart decorated with data owned by the user and product services."""

    id: int
    status: CartStatus
    created_at: datetime
    total: float
    owner: EnrichedUser
    lines: List[CartLineDetails] = Field(default_factory=list)
