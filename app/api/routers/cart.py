from __future__ import annotations

from typing import Annotated, List

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_enrichment_gateway
from app.db.session_async import commit, get_async_db
from app.schemas.cart import CartDetails, CartItemRead, CartRead
from app.services import cart_service, email_service
from app.services.enrichment import EnrichmentGateway
from app.services.exceptions import ResourceNotFoundError

router = APIRouter(prefix="/carts", tags=["carts"])

# Ids fuera del rango de la columna no llegan al driver.
OwnerId = Annotated[int, Path(ge=cart_service.INT_COLUMN_MIN, le=cart_service.INT_COLUMN_MAX)]
CartId = Annotated[int, Path(ge=cart_service.INT_COLUMN_MIN, le=cart_service.INT_COLUMN_MAX)]


@router.post("/{owner_id}", response_model=CartRead, status_code=status.HTTP_201_CREATED)
async def create_cart(owner_id: OwnerId, db: AsyncSession = Depends(get_async_db)):
    cart = await cart_service.create_cart(db, owner_id=owner_id)
    await commit(db)
    return cart


@router.get("/{owner_id}/active", response_model=CartRead)
async def get_active_cart(owner_id: OwnerId, db: AsyncSession = Depends(get_async_db)):
    cart = await cart_service.get_active_cart(db, owner_id=owner_id)
    if not cart:
        raise ResourceNotFoundError(f"No active cart for owner {owner_id}")
    return cart


@router.get("/{cart_id}", response_model=CartRead)
async def get_cart(cart_id: CartId, db: AsyncSession = Depends(get_async_db)):
    return await cart_service.get_cart(db, cart_id)


@router.get("/{cart_id}/details", response_model=CartDetails)
async def get_cart_details(
    cart_id: CartId,
    db: AsyncSession = Depends(get_async_db),
    gateway: EnrichmentGateway = Depends(get_enrichment_gateway),
):
    return await cart_service.get_cart_details(db, gateway, cart_id)


@router.post("/{cart_id}/items", response_model=CartItemRead, status_code=status.HTTP_201_CREATED)
async def add_cart_item(
    cart_id: CartId,
    product_id: int = Query(..., alias="productId"),
    quantity: int = Query(..., description="Cantidad, mayor que cero"),
    unit_price: float = Query(..., alias="unitPrice", description="Precio unitario, mayor que cero"),
    db: AsyncSession = Depends(get_async_db),
):
    item = await cart_service.add_item(
        db,
        cart_id=cart_id,
        product_id=product_id,
        quantity=quantity,
        unit_price=unit_price,
    )
    await commit(db)
    return item


@router.get("/{cart_id}/items", response_model=List[CartItemRead])
async def list_cart_items(cart_id: CartId, db: AsyncSession = Depends(get_async_db)):
    return await cart_service.list_items(db, cart_id)


@router.post("/{cart_id}/complete", response_model=CartRead)
async def complete_cart(
    cart_id: CartId,
    notify: bool = Query(False, description="Enviar el email de confirmación tras completar"),
    db: AsyncSession = Depends(get_async_db),
    gateway: EnrichmentGateway = Depends(get_enrichment_gateway),
):
    cart = await cart_service.complete_cart(db, cart_id)
    await commit(db)
    if notify:
        # El carrito ya quedó completado aunque el envío falle.
        order = await cart_service.confirm_completed_cart(db, gateway, cart_id)
        await email_service.notify_order_confirmation(order)
    return cart
