from .exceptions import CheckoutError, ValidationError, GatewayError, StoreError
from .handlers import register_exception_handlers

__all__ = [
    "CheckoutError",
    "ValidationError",
    "GatewayError",
    "StoreError",
    "register_exception_handlers",
]
