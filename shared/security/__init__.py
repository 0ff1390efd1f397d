from .api_key import verify_api_key
from .dependencies import verify_admin_api_key
from .rate_limiter import limiter, client_ip

__all__ = [
    "verify_api_key",
    "verify_admin_api_key",
    "limiter",
    "client_ip"
]
