# app/models/cart.py
from decimal import Decimal

from sqlalchemy import CheckConstraint, DateTime, Enum, ForeignKey, Index, Integer, Numeric, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.session import Base
from app.domain.enums import CartStatus


class Cart(Base):
    """Aggregate root: a shopping session for one owner.

    Nothing at the schema level prevents two active carts for the same owner;
    the index only speeds up the active-cart lookup.
    """

    __tablename__ = "carts"
    __table_args__ = (
        Index("ix_carts_owner_id_status", "owner_id", "status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    owner_id: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[CartStatus] = mapped_column(
        Enum(CartStatus, name="cart_status"), default=CartStatus.active, nullable=False
    )
    created_at = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    items: Mapped[list["CartItem"]] = relationship(
        "CartItem",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="CartItem.id",
        lazy="selectin",
    )

    @property
    def total(self) -> Decimal:
        return sum((item.line_subtotal for item in self.items), Decimal("0"))


class CartItem(Base):
    __tablename__ = "cart_items"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_cart_items_quantity_positive"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Solo el id del carrito: el item no navega hacia su dueño.
    cart_id: Mapped[int] = mapped_column(Integer, ForeignKey("carts.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id: Mapped[int] = mapped_column(Integer, nullable=False)

    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    @property
    def line_subtotal(self) -> Decimal:
        return Decimal(self.quantity) * Decimal(self.unit_price)
