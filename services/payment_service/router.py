"""
The gateway callback is deliberately open: PushinPay does not sign its
deliveries, so the txid is the only correlation we get. Every parseable
delivery is acknowledged with 200, matched or not, so the gateway only
re-delivers when our store actually failed (500).
"""
from typing import Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.errors import ValidationError

from .schemas import WebhookAck, WebhookNotification
from .service import WebhookReconciler

router = APIRouter()
public_router = APIRouter()  # For any public endpoints (e.g. health check)

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

@public_router.get("/health", include_in_schema=False)
async def health_check():
    return {"service": "payment", "status": "running"}


async def read_payload(request: Request) -> Optional[dict]:
    """Webhook body as a dict, from JSON or form encoding. None if it is not an object."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        return dict(form) or None

    body = await request.body()
    if not body.strip():
        return None
    try:
        payload = await request.json()
    except ValueError:
        return None
    return payload if isinstance(payload, dict) else None


@router.post("/webhook", response_model=WebhookAck)
async def receive_webhook(request: Request, db: AsyncSession = Depends(get_db)):
    payload = await read_payload(request)
    if payload is None:
        raise ValidationError("No body received")

    notification = WebhookNotification.from_payload(payload)
    outcome = await WebhookReconciler.reconcile(db, notification)
    return WebhookAck(outcome=outcome)
