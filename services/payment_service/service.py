"""
Webhook reconciliation: the only place an order leaves "pending".

Deliveries are unauthenticated and at-least-once, so every transition is a
conditional UPDATE (WHERE status = 'pending') and a delivery that changes
nothing is still a successful delivery. Matching order:

1. exact txid, case-insensitive;
2. otherwise, when the delivery carries an amount, the most recent pending
   order of that amount gets paid and receives the txid it never stored.
   When a racing delivery pays that order first, the next pending order of
   the amount is tried.

Step 2 is a heuristic: two concurrent pending orders of the same amount are
indistinguishable to it.
"""
from typing import Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from services.order_service.repository import OrderRepository
from shared.errors import StoreError
from shared.observability import checkout_webhook_deliveries_total

from .schemas import ReconcileOutcome, WebhookNotification

logger = structlog.get_logger(__name__)


class WebhookReconciler:
    @staticmethod
    async def reconcile(db: AsyncSession, notification: WebhookNotification) -> ReconcileOutcome:
        log = logger.bind(
            transaction_id=notification.transaction_id,
            gateway_status=notification.status,
            amount_cents=notification.amount_cents,
        )
        try:
            outcome, order_id = await WebhookReconciler._apply(db, notification)
        except SQLAlchemyError as exc:
            checkout_webhook_deliveries_total.labels(outcome="error").inc()
            log.error("webhook_store_failed", error=str(exc))
            raise StoreError() from exc

        checkout_webhook_deliveries_total.labels(outcome=outcome.value).inc()
        log.info("webhook_reconciled", outcome=outcome.value, order_id=order_id)
        return outcome

    @staticmethod
    async def _apply(
        db: AsyncSession, notification: WebhookNotification
    ) -> tuple[ReconcileOutcome, Optional[int]]:
        if not notification.transaction_id:
            return ReconcileOutcome.MISSING_ID, None
        if not notification.approved:
            return ReconcileOutcome.IGNORED, None

        order = await OrderRepository.find_by_correlation_id(db, notification.transaction_id)
        if order:
            if await OrderRepository.mark_paid(db, order.id):
                return ReconcileOutcome.PAID, order.id
            # A known txid never falls through to the amount heuristic
            return ReconcileOutcome.ALREADY_PAID, order.id

        if notification.amount_cents is None:
            return ReconcileOutcome.UNMATCHED, None

        # Each lost write leaves its candidate paid, so the next lookup skips it
        while True:
            candidate = await OrderRepository.latest_pending_by_amount(db, notification.amount_cents)
            if not candidate:
                return ReconcileOutcome.UNMATCHED, None
            if await OrderRepository.rescue_paid(db, candidate.id, notification.transaction_id):
                return ReconcileOutcome.RESCUED, candidate.id

            # A concurrent delivery of this same notification may have won
            order = await OrderRepository.find_by_correlation_id(db, notification.transaction_id)
            if order:
                return ReconcileOutcome.ALREADY_PAID, order.id
