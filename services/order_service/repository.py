from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from .models import Order, OrderStatus


def _day_window(stmt, start: Optional[date], end: Optional[date]):
    """Restrict stmt to orders created between start and end, both days inclusive."""
    if start:
        stmt = stmt.where(Order.created_at >= datetime.combine(start, time.min, tzinfo=timezone.utc))
    if end:
        stmt = stmt.where(
            Order.created_at < datetime.combine(end + timedelta(days=1), time.min, tzinfo=timezone.utc)
        )
    return stmt


class OrderRepository:
    @staticmethod
    async def create_order(db: AsyncSession, order: Order) -> Order:
        db.add(order)
        await db.commit()
        await db.refresh(order)
        return order

    @staticmethod
    async def get_order(db: AsyncSession, order_id: int) -> Optional[Order]:
        # Conditional UPDATEs bypass the identity map; always read the row as stored
        result = await db.execute(
            select(Order).where(Order.id == order_id).execution_options(populate_existing=True)
        )
        return result.scalars().first()

    @staticmethod
    async def set_correlation_id(db: AsyncSession, order_id: int, correlation_id: str) -> bool:
        """Store the gateway txid on an order that has none yet."""
        stmt = (
            update(Order)
            .where(Order.id == order_id, Order.correlation_id.is_(None))
            .values(correlation_id=correlation_id)
            .execution_options(synchronize_session=False)
        )
        result = await db.execute(stmt)
        await db.commit()
        return result.rowcount > 0

    @staticmethod
    async def find_by_correlation_id(db: AsyncSession, correlation_id: str) -> Optional[Order]:
        result = await db.execute(
            select(Order)
            .where(func.lower(Order.correlation_id) == func.lower(correlation_id))
            .order_by(Order.id.desc())
            .limit(1)
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()

    @staticmethod
    async def mark_paid(db: AsyncSession, order_id: int) -> bool:
        """pending -> paid. Returns False when the order was already paid (or vanished)."""
        stmt = (
            update(Order)
            .where(Order.id == order_id, Order.status == OrderStatus.PENDING.value)
            .values(status=OrderStatus.PAID.value)
            .execution_options(synchronize_session=False)
        )
        result = await db.execute(stmt)
        await db.commit()
        return result.rowcount > 0

    @staticmethod
    async def rescue_paid(db: AsyncSession, order_id: int, correlation_id: str) -> bool:
        """
        pending -> paid for an order found by amount, backfilling the txid it never got.

        Refuses when another order already carries the txid, so a re-delivered
        notification cannot pay a second order of the same amount.
        """
        claimed = aliased(Order)
        already_claimed = (
            select(claimed.id)
            .where(func.lower(claimed.correlation_id) == correlation_id.lower())
            .exists()
        )
        stmt = (
            update(Order)
            .where(Order.id == order_id, Order.status == OrderStatus.PENDING.value, ~already_claimed)
            .values(status=OrderStatus.PAID.value, correlation_id=correlation_id)
            .execution_options(synchronize_session=False)
        )
        result = await db.execute(stmt)
        await db.commit()
        return result.rowcount > 0

    @staticmethod
    async def latest_pending_by_amount(db: AsyncSession, amount_cents: int) -> Optional[Order]:
        result = await db.execute(
            select(Order)
            .where(Order.status == OrderStatus.PENDING.value, Order.amount_cents == amount_cents)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .limit(1)
        )
        return result.scalars().first()

    # --- Admin dashboard queries ---

    @staticmethod
    async def totals_by_status(db: AsyncSession, start: Optional[date] = None, end: Optional[date] = None) -> dict:
        totals = {}
        buckets = {
            "paid": Order.status == OrderStatus.PAID.value,
            "pending": Order.status != OrderStatus.PAID.value,
        }
        for label, condition in buckets.items():
            stmt = select(func.coalesce(func.sum(Order.amount_cents), 0), func.count(Order.id)).where(condition)
            result = await db.execute(_day_window(stmt, start, end))
            total, count = result.one()
            totals[label] = {"total": int(total), "count": int(count)}
        return totals

    @staticmethod
    async def recent_orders(
        db: AsyncSession, limit: int = 20, start: Optional[date] = None, end: Optional[date] = None
    ) -> list[Order]:
        stmt = _day_window(select(Order), start, end).order_by(Order.id.desc()).limit(limit)
        result = await db.execute(stmt)
        return list(result.scalars().all())
