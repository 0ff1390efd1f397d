from .setup import setup_observability
from .metrics import (
    checkout_orders_created_total,
    checkout_charges_total,
    checkout_gateway_duration_seconds,
    checkout_webhook_deliveries_total
)
