# tests/conftest.py
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

import os
from typing import Generator

import httpx
import pytest
import pytest_asyncio

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["ASYNC_DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["EMAILS_ENABLED"] = "false"

from app.main import app
from app.api.deps import get_enrichment_gateway
from app.db.session import Base, SessionLocal as TestingSessionLocal, engine as sync_engine
from app.db.session_async import AsyncSessionLocal
from app.services.enrichment import EnrichmentGateway

USER_SERVICE_URL = "http://users.test/api/users"
PRODUCT_SERVICE_URL = "http://products.test/api/products"

# Datos de los servicios colaboradores
USERS = {
    1: {"id": 1, "nombre": "Juan Pérez", "correo": "juan.perez@email.com"},
    2: {"id": 2, "nombre": "María García", "correo": "maria.garcia@email.com"},
    3: {"id": 3, "name": "Carlos López", "email": "carlos.lopez"},
}

PRODUCTS = {
    1: {"id": 1, "nombre": "Laptop Gaming", "precio": 1299.99, "stock": 10},
    2: {"id": 2, "nombre": "Smartphone Pro", "precio": 899.99, "stock": 15},
    3: {"id": 3, "name": "Auriculares Wireless", "price": 199.99, "stock": 0},
}


def collaborators_handler(request: httpx.Request) -> httpx.Response:
    """Answer like the user and product services do."""
    *_, resource, raw_id = request.url.path.rstrip("/").split("/")
    records = USERS if resource == "users" else PRODUCTS
    record = records.get(int(raw_id))
    if record is None:
        return httpx.Response(404, json={"detail": "not found"})
    return httpx.Response(200, json=record)


def make_gateway(handler=collaborators_handler) -> EnrichmentGateway:
    return EnrichmentGateway(
        USER_SERVICE_URL,
        PRODUCT_SERVICE_URL,
        transport=httpx.MockTransport(handler),
    )


# ---------- Fixtures ----------
@pytest.fixture(scope="session", autouse=True)
def setup_database():
    """Crea las tablas en SQLite solo una vez por sesión de tests."""
    import app.models.cart  # noqa: F401

    Base.metadata.create_all(bind=sync_engine)
    yield
    Base.metadata.drop_all(bind=sync_engine)


@pytest.fixture(autouse=True)
def clean_tables():
    yield
    with sync_engine.begin() as connection:
        for table in reversed(Base.metadata.sorted_tables):
            connection.execute(table.delete())


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Sesión sync corta para inspeccionar la base desde los tests."""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def gateway() -> EnrichmentGateway:
    return make_gateway()


@pytest.fixture
def gateway_factory():
    """Gateway con un handler propio para simular fallos de los colaboradores."""
    return make_gateway


@pytest.fixture
def sent_emails(monkeypatch) -> list[dict]:
    """Captura los emails en lugar de entregarlos por SMTP."""
    outbox: list[dict] = []

    def _capture(to_email: str, subject: str, body: str) -> None:
        outbox.append({"to": to_email, "subject": subject, "body": body})

    monkeypatch.setattr("app.services.email_delivery.deliver_email", _capture)
    return outbox


@pytest_asyncio.fixture(scope="function")
async def client(gateway: EnrichmentGateway):
    """AsyncClient enlazado a la app, con los colaboradores simulados."""
    app.dependency_overrides[get_enrichment_gateway] = lambda: gateway
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def async_db_session() -> AsyncSession:
    """AsyncSession para probar los servicios directamente."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.rollback()
