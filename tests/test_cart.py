import pytest
from httpx import AsyncClient


async def _create_cart(client: AsyncClient, owner_id: int = 1) -> dict:
    resp = await client.post(f"/api/v1/carts/{owner_id}")
    assert resp.status_code == 201, resp.text
    return resp.json()


async def _add_item(client: AsyncClient, cart_id: int, product_id: int, quantity, unit_price):
    return await client.post(
        f"/api/v1/carts/{cart_id}/items",
        params={"productId": product_id, "quantity": quantity, "unitPrice": unit_price},
    )


@pytest.mark.asyncio
async def test_cart_checkout_scenario(client: AsyncClient):
    cart = await _create_cart(client, owner_id=1)
    assert cart["status"] == "active"
    assert cart["owner_id"] == 1
    assert cart["items"] == []
    assert cart["total"] == 0.0

    first = await _add_item(client, cart["id"], 1, 2, 10.0)
    assert first.status_code == 201, first.text
    second = await _add_item(client, cart["id"], 2, 1, 5.0)
    assert second.status_code == 201, second.text

    items_resp = await client.get(f"/api/v1/carts/{cart['id']}/items")
    assert items_resp.status_code == 200
    items = items_resp.json()
    assert [(i["product_id"], i["quantity"], i["unit_price"]) for i in items] == [(1, 2, 10.0), (2, 1, 5.0)]
    assert all(i["cart_id"] == cart["id"] for i in items)

    complete_resp = await client.post(f"/api/v1/carts/{cart['id']}/complete")
    assert complete_resp.status_code == 200, complete_resp.text
    assert complete_resp.json()["status"] == "completed"

    rejected = await _add_item(client, cart["id"], 3, 1, 1.0)
    assert rejected.status_code == 409
    assert "active" in rejected.json()["detail"]


@pytest.mark.asyncio
async def test_cart_total_is_sum_of_line_subtotals(client: AsyncClient):
    cart = await _create_cart(client)
    await _add_item(client, cart["id"], 1, 2, 10.0)
    await _add_item(client, cart["id"], 2, 3, 5.0)

    resp = await client.get(f"/api/v1/carts/{cart['id']}")
    assert resp.status_code == 200
    data = resp.json()
    assert data["total"] == 35.0
    assert [i["line_subtotal"] for i in data["items"]] == [20.0, 15.0]


@pytest.mark.asyncio
async def test_active_cart_lookup(client: AsyncClient):
    missing = await client.get("/api/v1/carts/7/active")
    assert missing.status_code == 404

    cart = await _create_cart(client, owner_id=7)
    found = await client.get("/api/v1/carts/7/active")
    assert found.status_code == 200
    assert found.json()["id"] == cart["id"]

    await client.post(f"/api/v1/carts/{cart['id']}/complete")
    after = await client.get("/api/v1/carts/7/active")
    assert after.status_code == 404


@pytest.mark.asyncio
async def test_second_create_leaves_two_active_carts(client: AsyncClient):
    first = await _create_cart(client, owner_id=5)
    second = await _create_cart(client, owner_id=5)
    assert first["id"] != second["id"]
    assert second["status"] == "active"

    active = await client.get("/api/v1/carts/5/active")
    assert active.json()["id"] == first["id"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "quantity, unit_price",
    [(0, 10.0), (-1, 10.0), (1, 0), (1, -2.5)],
)
async def test_add_item_rejects_invalid_arguments(client: AsyncClient, quantity, unit_price):
    cart = await _create_cart(client)
    resp = await _add_item(client, cart["id"], 1, quantity, unit_price)
    assert resp.status_code == 422, resp.text

    items = await client.get(f"/api/v1/carts/{cart['id']}/items")
    assert items.json() == []


@pytest.mark.asyncio
async def test_add_item_to_unknown_cart(client: AsyncClient):
    resp = await _add_item(client, 9999, 1, 1, 1.0)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_completed_cart_rejects_items_even_with_invalid_arguments(client: AsyncClient):
    cart = await _create_cart(client)
    await client.post(f"/api/v1/carts/{cart['id']}/complete")

    resp = await _add_item(client, cart["id"], 1, 0, -1.0)
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_list_items_of_unknown_cart_is_empty(client: AsyncClient):
    resp = await client.get("/api/v1/carts/424242/items")
    assert resp.status_code == 200
    assert resp.json() == []


@pytest.mark.asyncio
async def test_complete_twice_is_not_an_error(client: AsyncClient):
    cart = await _create_cart(client)
    first = await client.post(f"/api/v1/carts/{cart['id']}/complete")
    second = await client.post(f"/api/v1/carts/{cart['id']}/complete")
    assert first.status_code == 200
    assert second.status_code == 200
    assert second.json()["status"] == "completed"


@pytest.mark.asyncio
async def test_complete_unknown_cart(client: AsyncClient):
    resp = await client.post("/api/v1/carts/31337/complete")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_cart_details_are_enriched(client: AsyncClient):
    cart = await _create_cart(client, owner_id=2)
    await _add_item(client, cart["id"], 1, 1, 1000.0)

    resp = await client.get(f"/api/v1/carts/{cart['id']}/details")
    assert resp.status_code == 200, resp.text
    details = resp.json()
    assert details["owner"] == {"id": 2, "name": "María García", "email": "maria.garcia@email.com"}
    line = details["lines"][0]
    assert line["product"]["name"] == "Laptop Gaming"
    assert line["product"]["available"] is True
    # El precio del item es el congelado, no el del catálogo
    assert line["item"]["unit_price"] == 1000.0
    assert details["total"] == 1000.0


@pytest.mark.asyncio
async def test_cart_details_unknown_owner(client: AsyncClient):
    cart = await _create_cart(client, owner_id=99)
    resp = await client.get(f"/api/v1/carts/{cart['id']}/details")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_complete_with_notify_sends_confirmation(client: AsyncClient, sent_emails):
    cart = await _create_cart(client, owner_id=1)
    await _add_item(client, cart["id"], 1, 2, 10.0)
    await _add_item(client, cart["id"], 2, 1, 5.0)

    resp = await client.post(f"/api/v1/carts/{cart['id']}/complete", params={"notify": "true"})
    assert resp.status_code == 200, resp.text

    assert len(sent_emails) == 1
    email = sent_emails[0]
    assert email["to"] == "juan.perez@email.com"
    assert email["subject"] == f"Confirmación de compra - Pedido #{cart['id']}"
    assert "- Laptop Gaming x2 - $10.00" in email["body"]
    assert "- Smartphone Pro - $5.00" in email["body"]
    assert "Total de la compra: $25.00" in email["body"]


@pytest.mark.asyncio
async def test_complete_empty_cart_with_notify_fails_validation_but_stays_completed(client: AsyncClient, sent_emails):
    cart = await _create_cart(client, owner_id=1)

    resp = await client.post(f"/api/v1/carts/{cart['id']}/complete", params={"notify": "true"})
    assert resp.status_code == 422
    assert sent_emails == []

    fetched = await client.get(f"/api/v1/carts/{cart['id']}")
    assert fetched.json()["status"] == "completed"


@pytest.mark.asyncio
@pytest.mark.parametrize("unit_price", ["0.001", "10.005", "1e12"])
async def test_add_item_rejects_prices_that_would_be_rounded(client: AsyncClient, unit_price):
    cart = await _create_cart(client)
    resp = await _add_item(client, cart["id"], 1, 1, unit_price)
    assert resp.status_code == 422, resp.text

    items = await client.get(f"/api/v1/carts/{cart['id']}/items")
    assert items.json() == []


@pytest.mark.asyncio
@pytest.mark.parametrize("product_id, quantity", [(1, 2**63), (2**40, 1)])
async def test_add_item_rejects_out_of_range_integers(client: AsyncClient, product_id, quantity):
    cart = await _create_cart(client)
    resp = await _add_item(client, cart["id"], product_id, quantity, 1.0)
    assert resp.status_code == 422, resp.text

    items = await client.get(f"/api/v1/carts/{cart['id']}/items")
    assert items.json() == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "method, path",
    [
        ("post", f"/api/v1/carts/{2**63}"),
        ("get", f"/api/v1/carts/{2**31}/active"),
        ("get", f"/api/v1/carts/{2**40}"),
        ("get", f"/api/v1/carts/{2**40}/items"),
        ("post", f"/api/v1/carts/{2**40}/complete"),
    ],
)
async def test_out_of_range_path_ids_are_rejected(client: AsyncClient, method, path):
    resp = await getattr(client, method)(path)
    assert resp.status_code == 422
