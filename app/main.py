# app/main.py
from fastapi import FastAPI

from app.api.error_handlers import register_exception_handlers
from app.api.routers import cart, health, notifications
from app.core.config import settings
from app.core.logging import setup_logging
from app.middleware import ObservabilityMiddleware

# --- Models registration (necesario para que Alembic los detecte) ---
import app.models.cart  # noqa: F401

TAGS_METADATA = [
    {"name": "carts", "description": "Ciclo de vida del carrito: creación, items y cierre."},
    {"name": "notifications", "description": "Emails de confirmación de compra."},
    {"name": "health", "description": "Estado del servicio."},
]

setup_logging()

app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    description=(
        "Servicio de carritos de la tienda.\n\n"
        "- **Carts**: un carrito ACTIVO por compra, items con precio congelado al agregarlos.\n"
        "- **Notifications**: confirmaciones por email con datos de usuarios y productos externos."
    ),
    openapi_tags=TAGS_METADATA,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

# --- Middlewares ---
app.add_middleware(ObservabilityMiddleware)

register_exception_handlers(app)

# --- Routers ---
app.include_router(health.router)
app.include_router(cart.router, prefix=settings.API_V1_STR)
app.include_router(notifications.router, prefix=settings.API_V1_STR)


# --- Endpoint raíz ---
@app.get("/", include_in_schema=False)
def root():
    return {"status": "ok", "docs_url": "/docs", "redoc_url": "/redoc"}
