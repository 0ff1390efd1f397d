from fastapi import FastAPI

from shared.errors import register_exception_handlers
from shared.observability.setup import setup_observability

from services.order_service.models import Order  # noqa: F401 registers the order store with Base
from .router import router, public_router


payment_app = FastAPI(title="Payment Service", version="2.0.0")

# Emits structured logs, OTLP traces and /metrics
setup_observability(payment_app, "payment_service")

# StoreError is the only failure that reaches the gateway as non-200
register_exception_handlers(payment_app)

payment_app.include_router(router)
payment_app.include_router(public_router)
