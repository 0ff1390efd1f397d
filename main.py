from fastapi import FastAPI
from shared.config.database import create_tables, dispose_engine

# IMPORTANT: import models so they register with Base
from services.order_service import models as order_models
from services.product_service import models as product_models

from services.product_service.main import product_app
from services.order_service.main import order_app
from services.payment_service.main import payment_app
from services.admin_service.main import admin_app

app = FastAPI(title="PIX Checkout")

# Mounted sub-apps do not receive lifespan events; the cluster owns the store
@app.on_event("startup")
async def startup_event():
    await create_tables()

@app.on_event("shutdown")
async def shutdown_event():
    await dispose_engine()

@app.get("/health", include_in_schema=False)
async def health_check():
    return {"service": "checkout", "status": "running"}

app.mount("/products", product_app)
app.mount("/orders", order_app)
app.mount("/payments", payment_app)
app.mount("/admin", admin_app)
