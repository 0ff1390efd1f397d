import json

import httpx
import pytest

from services.payment_service.gateway import GENERIC_GATEWAY_MESSAGE
from shared.errors import GatewayError

CALLBACK = "https://shop.example.com/payments/webhook"


async def test_create_charge_sends_amount_and_callback(gateway):
    charge = await gateway.client().create_charge(1000, CALLBACK)

    assert charge.transaction_id == "tx_999"
    assert charge.raw_payload["qr_code"] == gateway.payload["qr_code"]

    request = gateway.requests[0]
    assert request.method == "POST"
    assert request.url == "https://gateway.test/api/pix/cashIn"
    assert request.headers["Authorization"] == "Bearer test-token"
    assert request.headers["Accept"] == "application/json"
    assert json.loads(request.content) == {"value": 1000, "webhook_url": CALLBACK}


async def test_transaction_id_read_from_alternate_field(gateway):
    gateway.payload = {"transaction_id": "alt_1", "qr_code": "..."}

    charge = await gateway.client().create_charge(500, CALLBACK)

    assert charge.transaction_id == "alt_1"


async def test_missing_transaction_id_is_not_an_error(gateway):
    gateway.payload = {"qr_code": "..."}

    charge = await gateway.client().create_charge(500, CALLBACK)

    assert charge.transaction_id is None
    assert charge.raw_payload == {"qr_code": "..."}


async def test_rejection_carries_gateway_message(gateway):
    gateway.status_code = 422
    gateway.payload = {"message": "O campo value deve ser no mínimo 50."}

    with pytest.raises(GatewayError) as excinfo:
        await gateway.client().create_charge(10, CALLBACK)

    assert excinfo.value.message == "O campo value deve ser no mínimo 50."


async def test_rejection_without_message_uses_generic_text(gateway):
    gateway.status_code = 500
    gateway.content = b"<html>Bad Gateway</html>"

    with pytest.raises(GatewayError) as excinfo:
        await gateway.client().create_charge(1000, CALLBACK)

    assert excinfo.value.message == GENERIC_GATEWAY_MESSAGE


async def test_network_failure_raises_gateway_error(gateway):
    gateway.error = httpx.ConnectError("connection refused")

    with pytest.raises(GatewayError) as excinfo:
        await gateway.client().create_charge(1000, CALLBACK)

    assert "unreachable" in excinfo.value.message


async def test_timeout_raises_gateway_error(gateway):
    gateway.error = httpx.ReadTimeout("timed out")

    with pytest.raises(GatewayError):
        await gateway.client().create_charge(1000, CALLBACK)


async def test_success_with_unreadable_body_raises(gateway):
    gateway.content = b"not json"

    with pytest.raises(GatewayError):
        await gateway.client().create_charge(1000, CALLBACK)
