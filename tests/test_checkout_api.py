from sqlalchemy.exc import OperationalError

import main
from shared.config import settings
from shared.config.database import get_db

ORDER = {"customer": {"name": "Ana", "phone": "11999990000", "email": "ana@example.com"}, "valueInCents": 1000}


async def test_checkout_end_to_end(client, gateway):
    created = await client.post("/orders/", json=ORDER)
    assert created.status_code == 200
    body = created.json()
    assert body["id"] == "tx_999"
    local_id = body["local_id"]

    sent = gateway.requests[0]
    assert b'"webhook_url"' in sent.content
    assert settings.webhook_url().encode() in sent.content

    polled = await client.get("/orders/status", params={"id": local_id})
    assert polled.json() == {"status": "pending"}

    ack = await client.post("/payments/webhook", json={"id": "TX_999", "status": "Approved"})
    assert ack.status_code == 200
    assert ack.json() == {"received": True, "outcome": "paid"}

    polled = await client.get("/orders/status", params={"id": local_id})
    assert polled.json() == {"status": "paid"}


async def test_duplicate_webhook_is_acknowledged(client):
    created = await client.post("/orders/", json=ORDER)
    local_id = created.json()["local_id"]

    first = await client.post("/payments/webhook", json={"id": "tx_999", "status": "paid"})
    second = await client.post("/payments/webhook", json={"id": "tx_999", "status": "paid"})

    assert first.json()["outcome"] == "paid"
    assert second.status_code == 200
    assert second.json()["outcome"] == "already_paid"
    assert (await client.get("/orders/status", params={"id": local_id})).json() == {"status": "paid"}


async def test_gateway_failure_returns_error_and_keeps_pending(client, gateway):
    gateway.status_code = 401
    gateway.payload = {"message": "Unauthenticated."}

    response = await client.post("/orders/", json=ORDER)

    assert response.status_code == 500
    assert response.json() == {"error": "Unauthenticated."}

    dashboard = await client.get("/admin/dashboard", headers={"X-Internal-API-Key": "test-admin-key"})
    orders = dashboard.json()["recent_orders"]
    assert len(orders) == 1
    assert orders[0]["status"] == "pending"
    assert orders[0]["correlation_id"] is None


async def test_missing_customer_is_a_client_error(client, gateway):
    response = await client.post("/orders/", json={"valueInCents": 1000})

    assert response.status_code == 400
    assert "error" in response.json()
    assert gateway.requests == []


async def test_non_positive_amount_is_a_client_error(client):
    response = await client.post("/orders/", json={**ORDER, "valueInCents": 0})

    assert response.status_code == 400


async def test_status_of_unknown_id_is_sentinel(client):
    response = await client.get("/orders/status", params={"id": 999999})

    assert response.status_code == 200
    assert response.json() == {"status": "erro"}


async def test_status_with_garbage_or_missing_id_is_sentinel(client):
    assert (await client.get("/orders/status", params={"id": "abc"})).json() == {"status": "erro"}
    assert (await client.get("/orders/status")).json() == {"status": "erro"}


async def test_status_with_oversized_id_is_sentinel(client):
    response = await client.get("/orders/status", params={"id": "99999999999999999999"})

    assert response.status_code == 200
    assert response.json() == {"status": "erro"}


async def test_webhook_accepts_form_encoding(client, make_order, load_order):
    order = await make_order(correlation_id="tx_form")

    response = await client.post("/payments/webhook", data={"transaction_id": "TX_FORM", "status": "PAID"})

    assert response.status_code == 200
    assert response.json()["outcome"] == "paid"
    assert (await load_order(order.id)).status == "paid"


async def test_webhook_value_rescue_over_http(client, make_order, load_order):
    order = await make_order(amount_cents=4990)

    response = await client.post("/payments/webhook", json={"id": "tx_late", "status": "paid", "value": 4990})

    assert response.json()["outcome"] == "rescued"
    stored = await load_order(order.id)
    assert stored.status == "paid"
    assert stored.correlation_id == "tx_late"


async def test_webhook_unknown_id_still_acknowledged(client):
    response = await client.post("/payments/webhook", json={"id": "nobody", "status": "paid"})

    assert response.status_code == 200
    assert response.json() == {"received": True, "outcome": "unmatched"}


async def test_webhook_without_id_still_acknowledged(client):
    response = await client.post("/payments/webhook", json={"status": "paid"})

    assert response.status_code == 200
    assert response.json()["outcome"] == "missing_id"


async def test_webhook_with_empty_body_is_rejected(client):
    response = await client.post("/payments/webhook", content=b"", headers={"Content-Type": "application/json"})

    assert response.status_code == 400


async def test_webhook_with_non_object_body_is_rejected(client):
    response = await client.post("/payments/webhook", json=["tx_1", "paid"])

    assert response.status_code == 400


class BrokenSession:
    async def execute(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("database is down"))


async def test_webhook_store_failure_asks_gateway_to_retry(client):
    async def broken_db():
        yield BrokenSession()

    main.payment_app.dependency_overrides[get_db] = broken_db

    response = await client.post("/payments/webhook", json={"id": "tx_1", "status": "paid"})

    assert response.status_code == 500
    assert "error" in response.json()


async def test_health_endpoints(client):
    for path in ("/health", "/orders/health", "/payments/health", "/products/health", "/admin/health"):
        response = await client.get(path)
        assert response.status_code == 200
        assert response.json()["status"] == "running"


def test_only_the_cluster_app_manages_the_store_lifecycle():
    assert main.app.router.on_startup
    assert main.app.router.on_shutdown
    for sub_app in (main.product_app, main.order_app, main.payment_app, main.admin_app):
        assert sub_app.router.on_startup == []
        assert sub_app.router.on_shutdown == []
