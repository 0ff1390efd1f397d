import os

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ["TRACING_ENABLED"] = "false"
os.environ["CHECKOUT_RATE_LIMIT"] = "1000/minute"
os.environ["ADMIN_API_KEY"] = "test-admin-key"
os.environ.setdefault("BASE_URL", "https://shop.example.com")

import httpx
import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

import main
from services.order_service.models import Order, OrderStatus
from services.order_service.repository import OrderRepository
from services.payment_service.gateway import PixGatewayClient, get_gateway_client
from shared.config.database import Base, get_db


class GatewayStub:
    """Stands in for PushinPay behind httpx.MockTransport and records every request."""

    def __init__(self):
        self.requests = []
        self.status_code = 200
        self.payload = {"id": "tx_999", "qr_code": "00020101021226...", "value": 1000, "status": "created"}
        self.content = None
        self.error = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error:
            raise self.error
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, json=self.payload)

    def client(self) -> PixGatewayClient:
        return PixGatewayClient(
            base_url="https://gateway.test",
            token="test-token",
            timeout=5.0,
            transport=httpx.MockTransport(self.handler),
        )


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'checkout.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def gateway():
    return GatewayStub()


@pytest.fixture
def make_order(session_factory):
    async def _make(amount_cents=1000, correlation_id=None, status=OrderStatus.PENDING.value, name="Ana"):
        async with session_factory() as session:
            order = Order(
                name=name,
                phone="11999990000",
                amount_cents=amount_cents,
                status=status,
                correlation_id=correlation_id,
            )
            return await OrderRepository.create_order(session, order)
    return _make


@pytest.fixture
def load_order(session_factory):
    async def _load(order_id):
        async with session_factory() as session:
            return await OrderRepository.get_order(session, order_id)
    return _load


SUB_APPS = (main.product_app, main.order_app, main.payment_app, main.admin_app)


@pytest.fixture
async def client(session_factory, gateway):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    for sub_app in SUB_APPS:
        sub_app.dependency_overrides[get_db] = override_get_db
    main.order_app.dependency_overrides[get_gateway_client] = gateway.client

    transport = httpx.ASGITransport(app=main.app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
        yield http

    for sub_app in SUB_APPS:
        sub_app.dependency_overrides.clear()
