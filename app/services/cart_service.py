from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger
from app.db.operations import flush_async, refresh_async
from app.domain.enums import CartStatus
from app.models.cart import Cart, CartItem
from app.schemas.cart import CartDetails, CartItemRead, CartLineDetails
from app.schemas.enrichment import EnrichedProduct, EnrichedUser
from app.schemas.notification import OrderConfirmation, OrderOwner, OrderProduct
from app.services.enrichment import EnrichmentGateway
from app.services.exceptions import DomainValidationError, InvalidStateError, ResourceNotFoundError

logger = get_logger(__name__)

# Rango de INTEGER en PostgreSQL
INT_COLUMN_MIN = -(2**31)
INT_COLUMN_MAX = 2**31 - 1
# Numeric(12, 2): 10 dígitos enteros y 2 decimales
PRICE_SCALE = 2
PRICE_LIMIT = Decimal(10) ** 10


async def _refresh_cart(db: AsyncSession, cart: Cart) -> None:
    await refresh_async(db, cart)
    await refresh_async(db, cart, attribute_names=["items"])


async def _load_cart(db: AsyncSession, cart_id: int) -> Cart:
    cart = await db.get(Cart, cart_id)
    if not cart:
        raise ResourceNotFoundError(f"Cart {cart_id} not found")
    return cart


def validate_item_input(product_id, quantity, unit_price) -> tuple[int, int, Decimal]:
    """Normalise the add-item arguments or raise ``DomainValidationError``.

    Values must fit the columns as-is: ``Integer`` ids and quantities, and
    ``Numeric(12, 2)`` prices. Anything the database would round or reject is
    refused here.
    """
    if product_id is None:
        raise DomainValidationError("productId is required")
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise DomainValidationError("quantity must be a positive integer")
    if quantity > INT_COLUMN_MAX:
        raise DomainValidationError(f"quantity must not exceed {INT_COLUMN_MAX}")
    if unit_price is None or isinstance(unit_price, bool):
        raise DomainValidationError("unitPrice must be greater than zero")
    try:
        price = Decimal(str(unit_price))
    except InvalidOperation as exc:
        raise DomainValidationError("unitPrice must be a number") from exc
    if not price.is_finite() or price <= 0:
        raise DomainValidationError("unitPrice must be greater than zero")
    if price.as_tuple().exponent < -PRICE_SCALE:
        raise DomainValidationError(f"unitPrice supports at most {PRICE_SCALE} decimal places")
    if price >= PRICE_LIMIT:
        raise DomainValidationError(f"unitPrice must be lower than {PRICE_LIMIT}")
    try:
        product_id = int(product_id)
    except (TypeError, ValueError) as exc:
        raise DomainValidationError("productId must be an integer") from exc
    if not INT_COLUMN_MIN <= product_id <= INT_COLUMN_MAX:
        raise DomainValidationError("productId is out of range")
    return product_id, quantity, price


async def create_cart(db: AsyncSession, *, owner_id: int) -> Cart:
    # Sin chequeo de carrito activo previo: dos llamadas dejan dos carritos activos.
    cart = Cart(owner_id=owner_id, status=CartStatus.active)
    db.add(cart)
    await flush_async(db)
    await _refresh_cart(db, cart)
    logger.info("Cart created", extra={"cart_id": cart.id, "owner_id": owner_id})
    return cart


async def get_active_cart(db: AsyncSession, *, owner_id: int) -> Cart | None:
    """Return the owner's active cart, the oldest one if there are several."""
    stmt = (
        select(Cart)
        .where(Cart.owner_id == owner_id, Cart.status == CartStatus.active)
        .order_by(Cart.id.asc())
        .limit(1)
    )
    result = await db.execute(stmt)
    return result.scalars().first()


async def get_cart(db: AsyncSession, cart_id: int) -> Cart:
    return await _load_cart(db, cart_id)


async def add_item(
    db: AsyncSession,
    *,
    cart_id: int,
    product_id: int,
    quantity: int,
    unit_price: Decimal | float,
) -> CartItem:
    cart = await _load_cart(db, cart_id)
    if cart.status != CartStatus.active:
        raise InvalidStateError(f"Cart {cart_id} is {cart.status.value}; items can only be added to active carts")

    product_id, quantity, price = validate_item_input(product_id, quantity, unit_price)

    item = CartItem(product_id=product_id, quantity=quantity, unit_price=price)
    cart.items.append(item)
    await flush_async(db)
    await refresh_async(db, item)
    logger.info(
        "Item added to cart",
        extra={"cart_id": cart_id, "product_id": product_id, "quantity": quantity},
    )
    return item


async def list_items(db: AsyncSession, cart_id: int) -> Sequence[CartItem]:
    """Items in insertion order. Unknown carts yield an empty list, not an error."""
    stmt = select(CartItem).where(CartItem.cart_id == cart_id).order_by(CartItem.id.asc())
    result = await db.execute(stmt)
    return result.scalars().all()


async def complete_cart(db: AsyncSession, cart_id: int) -> Cart:
    cart = await _load_cart(db, cart_id)
    # Completar dos veces no es error: se vuelve a persistir el mismo estado.
    cart.status = CartStatus.completed
    db.add(cart)
    await flush_async(db)
    await _refresh_cart(db, cart)
    logger.info("Cart completed", extra={"cart_id": cart_id, "owner_id": cart.owner_id})
    return cart


async def get_cart_details(db: AsyncSession, gateway: EnrichmentGateway, cart_id: int) -> CartDetails:
    cart = await _load_cart(db, cart_id)
    owner = await gateway.resolve_user(cart.owner_id)
    lines = []
    for item in cart.items:
        product = await gateway.resolve_product(item.product_id)
        lines.append(CartLineDetails(item=CartItemRead.model_validate(item), product=product))
    return CartDetails(
        id=cart.id,
        status=cart.status,
        created_at=cart.created_at,
        total=float(cart.total),
        owner=owner,
        lines=lines,
    )


def build_order_confirmation(
    cart: Cart,
    owner: EnrichedUser,
    products: dict[int, EnrichedProduct],
) -> OrderConfirmation:
    """Order payload for a completed cart, priced with the snapshot prices."""
    return OrderConfirmation(
        owner=OrderOwner(name=owner.name, email=owner.email),
        products=[
            OrderProduct(
                name=products[item.product_id].name,
                price=float(item.unit_price),
                quantity=item.quantity,
            )
            for item in cart.items
        ],
        order_number=str(cart.id),
        purchased_at=datetime.now(timezone.utc),
        total=float(cart.total),
    )


async def confirm_completed_cart(db: AsyncSession, gateway: EnrichmentGateway, cart_id: int) -> OrderConfirmation:
    """Resolve the data a completed cart's confirmation email needs."""
    cart = await _load_cart(db, cart_id)
    if cart.status != CartStatus.completed:
        raise InvalidStateError(f"Cart {cart_id} is not completed")
    owner = await gateway.resolve_user(cart.owner_id)
    products: dict[int, EnrichedProduct] = {}
    for item in cart.items:
        if item.product_id not in products:
            products[item.product_id] = await gateway.resolve_product(item.product_id)
    return build_order_confirmation(cart, owner, products)
