from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.security import verify_admin_api_key

from .schemas import DashboardResponse, ProductAction
from .service import AdminService

# Router-level dependency protects every admin endpoint
router = APIRouter(dependencies=[Depends(verify_admin_api_key)])
public_router = APIRouter()  # For any public endpoints (e.g. health check)

@public_router.get("/health", include_in_schema=False)
async def health_check():
    return {"service": "admin", "status": "running"}


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(
    start: Optional[date] = Query(default=None),
    end: Optional[date] = Query(default=None),
    db: AsyncSession = Depends(get_db),
):
    return await AdminService.dashboard(db, start, end)


@router.post("/products")
async def product_action(payload: ProductAction, db: AsyncSession = Depends(get_db)):
    await AdminService.apply_product_action(db, payload)
    return {"success": True}
