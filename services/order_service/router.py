from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from services.payment_service.gateway import PixGatewayClient, get_gateway_client
from shared.config import settings
from shared.config.database import get_db
from shared.security import limiter

from .models import UNKNOWN_STATUS
from .schemas import OrderCreate, StatusResponse
from .service import OrderService

router = APIRouter()
public_router = APIRouter()  # For any public endpoints (e.g. health check)

@public_router.get("/health", include_in_schema=False)
async def health_check():
    return {"service": "order", "status": "running"}


@router.post("/")
@limiter.limit(settings.CHECKOUT_RATE_LIMIT)  # per client IP
async def create_order(
    request: Request,                          # REQUIRED: slowapi needs this to check IP/Headers
    payload: OrderCreate,
    db: AsyncSession = Depends(get_db),
    gateway: PixGatewayClient = Depends(get_gateway_client),
):
    # Gateway charge descriptor (QR code, copy-paste code...) plus our local_id
    return await OrderService.create_order(db, gateway, payload, settings.webhook_url())


# Polling clients keep asking until "paid"; unknown ids are a sentinel, not a 404
@router.get("/status", response_model=StatusResponse)
async def check_status(
    id: Optional[str] = Query(default=None),
    db: AsyncSession = Depends(get_db),
):
    try:
        order_id = int(id)
    except (TypeError, ValueError):
        return StatusResponse(status=UNKNOWN_STATUS)
    return StatusResponse(status=await OrderService.get_status(db, order_id))
