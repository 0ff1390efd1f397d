from typing import List, Literal, Optional, Union

from pydantic import BaseModel

from services.order_service.schemas import OrderResponse
from services.product_service.schemas import ProductResponse


class StatusTotals(BaseModel):
    total: int # cents
    count: int


class DashboardResponse(BaseModel):
    paid: StatusTotals
    pending: StatusTotals # everything not yet paid
    recent_orders: List[OrderResponse]
    products: List[ProductResponse]


class ProductAction(BaseModel):
    """Body posted by the admin product form."""
    action: Literal["create", "edit", "delete"]
    id: Optional[int] = None
    type: Optional[str] = None
    name: Optional[str] = None
    price: Optional[Union[str, float]] = None # display price in reais, e.g. "12,50"
    image: Optional[str] = None
    description: Optional[str] = None
