"""
Client for the PushinPay PIX gateway.

One bounded, single-attempt call per checkout: a charge is requested with the
amount and the URL the gateway must call back once the payer settles it. The
gateway's response body is handed back untouched so fields we do not model
(QR code, copy-paste code, expiry...) reach the storefront.
"""
import time
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

import httpx
import structlog

from shared.config import settings
from shared.errors import GatewayError
from shared.observability import checkout_charges_total, checkout_gateway_duration_seconds

logger = structlog.get_logger(__name__)

CHARGE_PATH = "/api/pix/cashIn"

# The gateway renamed its transaction id field between API iterations
TRANSACTION_ID_FIELDS = ("id", "transaction_id")

GENERIC_GATEWAY_MESSAGE = "PIX gateway error"


def first_present(payload: dict, fields: Iterable[str]) -> Optional[Any]:
    """Value of the first field in priority order that is set and non-empty."""
    for name in fields:
        value = payload.get(name)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


@dataclass
class Charge:
    transaction_id: Optional[str]
    raw_payload: dict = field(default_factory=dict)


def _json_or_none(response: httpx.Response):
    try:
        return response.json()
    except ValueError:
        return None


def _error_message(payload) -> str:
    if isinstance(payload, dict):
        for key in ("message", "error"):
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    return GENERIC_GATEWAY_MESSAGE


class PixGatewayClient:
    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.transport = transport

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.token}",
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

    async def create_charge(self, amount_cents: int, callback_url: str) -> Charge:
        """
        Ask the gateway for a PIX charge of amount_cents.

        Raises GatewayError on transport failure, on any non-2xx answer and on a
        2xx answer that is not a JSON object. A missing transaction id is not an
        error: the charge is returned with transaction_id=None.
        """
        body = {"value": amount_cents, "webhook_url": callback_url}
        started = time.perf_counter()
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.post(CHARGE_PATH, json=body, headers=self._headers())
        except httpx.HTTPError as exc:
            checkout_charges_total.labels(status="failed").inc()
            logger.error("gateway_unreachable", amount_cents=amount_cents, error=str(exc))
            raise GatewayError(f"PIX gateway unreachable: {exc}") from exc
        finally:
            checkout_gateway_duration_seconds.observe(time.perf_counter() - started)

        payload = _json_or_none(response)

        if not response.is_success:
            message = _error_message(payload)
            checkout_charges_total.labels(status="failed").inc()
            logger.error(
                "gateway_rejected_charge",
                amount_cents=amount_cents,
                status_code=response.status_code,
                error=message,
            )
            raise GatewayError(message)

        if not isinstance(payload, dict):
            checkout_charges_total.labels(status="failed").inc()
            logger.error("gateway_unreadable_response", status_code=response.status_code)
            raise GatewayError("PIX gateway returned an unreadable response")

        transaction_id = first_present(payload, TRANSACTION_ID_FIELDS)
        checkout_charges_total.labels(status="success").inc()
        logger.info("gateway_charge_created", amount_cents=amount_cents, transaction_id=transaction_id)
        return Charge(
            transaction_id=str(transaction_id) if transaction_id is not None else None,
            raw_payload=payload,
        )


def get_gateway_client() -> PixGatewayClient:
    return PixGatewayClient(
        base_url=settings.PIX_GATEWAY_URL,
        token=settings.PUSHINPAY_TOKEN,
        timeout=settings.GATEWAY_TIMEOUT_SECONDS,
    )
