import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from services.payment_service.gateway import PixGatewayClient
from shared.errors import GatewayError, StoreError
from shared.observability import checkout_orders_created_total

from .models import MAX_ORDER_ID, Order, OrderStatus, UNKNOWN_STATUS
from .repository import OrderRepository
from .schemas import OrderCreate

logger = structlog.get_logger(__name__)


class OrderService:
    @staticmethod
    async def create_order(
        db: AsyncSession, gateway: PixGatewayClient, data: OrderCreate, callback_url: str
    ) -> dict:
        """
        Insert a pending order, request its PIX charge and remember the txid.

        The order row is not rolled back when the gateway fails: it stays pending
        without a correlation id and the customer simply starts checkout again.
        """
        order = Order(
            name=data.customer.name,
            phone=data.customer.phone,
            email=data.customer.email,
            amount_cents=data.value_in_cents,
            status=OrderStatus.PENDING.value,
        )
        try:
            order = await OrderRepository.create_order(db, order)
        except SQLAlchemyError as exc:
            logger.error("order_insert_failed", error=str(exc))
            raise StoreError() from exc

        checkout_orders_created_total.inc()
        log = logger.bind(order_id=order.id, amount_cents=order.amount_cents)
        log.info("order_created")

        try:
            charge = await gateway.create_charge(order.amount_cents, callback_url)
        except GatewayError as exc:
            log.warning("order_left_pending", error=exc.message)
            raise

        if charge.transaction_id:
            try:
                stored = await OrderRepository.set_correlation_id(db, order.id, charge.transaction_id)
            except SQLAlchemyError as exc:
                log.error("correlation_id_store_failed", transaction_id=charge.transaction_id, error=str(exc))
                raise StoreError() from exc
            if stored:
                log.info("correlation_id_stored", transaction_id=charge.transaction_id)
            else:
                log.warning("correlation_id_already_set", transaction_id=charge.transaction_id)
        else:
            # Only the amount-based webhook fallback can settle this order now
            log.warning("charge_without_transaction_id")

        return {**charge.raw_payload, "local_id": order.id}

    @staticmethod
    async def get_status(db: AsyncSession, order_id: int) -> str:
        """Current status of an order, or the "erro" sentinel. Never raises for polling clients."""
        if not 0 < order_id <= MAX_ORDER_ID:
            return UNKNOWN_STATUS
        try:
            order = await OrderRepository.get_order(db, order_id)
        except SQLAlchemyError as exc:
            logger.error("status_lookup_failed", order_id=order_id, error=str(exc))
            return UNKNOWN_STATUS
        if not order:
            return UNKNOWN_STATUS
        return order.status
