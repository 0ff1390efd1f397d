from prometheus_client import Counter, Histogram

# Business Metrics
checkout_orders_created_total = Counter(
    "checkout_orders_created_total",
    "Pending orders inserted by the checkout flow"
)

checkout_charges_total = Counter(
    "checkout_charges_total",
    "PIX charge requests sent to the gateway",
    ["status"] # Labels: 'success', 'failed'
)

checkout_gateway_duration_seconds = Histogram(
    "checkout_gateway_duration_seconds",
    "Latency of the gateway create-charge call in seconds"
)

checkout_webhook_deliveries_total = Counter(
    "checkout_webhook_deliveries_total",
    "Gateway webhook deliveries by reconciliation outcome",
    ["outcome"] # Labels: 'paid', 'rescued', 'already_paid', 'unmatched', 'ignored', 'missing_id', 'error'
)
