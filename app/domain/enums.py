# app/domain/enums.py
import enum


class CartStatus(str, enum.Enum):
    active = "active"
    completed = "completed"
    # Reservado: ninguna operación lleva un carrito a este estado.
    cancelled = "cancelled"
