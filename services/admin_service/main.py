from fastapi import FastAPI

from shared.errors import register_exception_handlers
from shared.observability import setup_observability

from services.order_service.models import Order  # noqa: F401 registers models with Base
from services.product_service.models import Product  # noqa: F401
from .router import router, public_router

admin_app = FastAPI(
    title="Admin Service",
    version="1.0.0",
    description="Sales totals, recent orders and catalogue maintenance.",
)

# --- OBSERVABILITY BOOTSTRAP ---
setup_observability(admin_app, "admin_service")
register_exception_handlers(admin_app)

admin_app.include_router(public_router)
admin_app.include_router(router)
