from datetime import date
from typing import Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from services.order_service.repository import OrderRepository
from services.order_service.schemas import OrderResponse
from services.product_service.schemas import ProductResponse, ProductWrite
from services.product_service.service import ProductService, parse_price_cents
from shared.errors import StoreError, ValidationError

from .schemas import DashboardResponse, ProductAction

logger = structlog.get_logger(__name__)

RECENT_ORDERS_LIMIT = 20


class AdminService:

    @staticmethod
    async def dashboard(
        db: AsyncSession, start: Optional[date] = None, end: Optional[date] = None
    ) -> DashboardResponse:
        if start and end and start > end:
            raise ValidationError("start must not be after end")
        try:
            totals = await OrderRepository.totals_by_status(db, start, end)
            orders = await OrderRepository.recent_orders(db, RECENT_ORDERS_LIMIT, start, end)
            products = await ProductService.list_products(db)
        except SQLAlchemyError as exc:
            logger.error("dashboard_query_failed", error=str(exc))
            raise StoreError() from exc

        return DashboardResponse(
            paid=totals["paid"],
            pending=totals["pending"],
            recent_orders=[OrderResponse.model_validate(order) for order in orders],
            products=[ProductResponse.model_validate(product) for product in products],
        )

    @staticmethod
    async def apply_product_action(db: AsyncSession, payload: ProductAction):
        if payload.action in ("edit", "delete") and payload.id is None:
            raise ValidationError(f"Product id is required to {payload.action}")

        try:
            if payload.action == "delete":
                deleted = await ProductService.delete_product(db, payload.id)
                logger.info("product_deleted", product_id=payload.id, deleted=deleted)
                return

            if not payload.name or not payload.name.strip():
                raise ValidationError("Product name is required")
            data = ProductWrite(
                type=payload.type,
                name=payload.name.strip(),
                price=parse_price_cents(payload.price),
                image_url=payload.image,
                description=payload.description,
            )
            if payload.action == "create":
                product = await ProductService.create_product(db, data)
                logger.info("product_created", product_id=product.id, price=product.price)
            else:
                await ProductService.edit_product(db, payload.id, data)
                logger.info("product_edited", product_id=payload.id, price=data.price)
        except SQLAlchemyError as exc:
            logger.error("product_action_failed", action=payload.action, error=str(exc))
            raise StoreError() from exc
