from slowapi import Limiter
from slowapi.util import get_remote_address
from fastapi import Request

def client_ip(request: Request) -> str:
    """
    Key function for SlowAPI.
    Checkout is anonymous, so buckets are keyed by the client's address,
    preferring the first X-Forwarded-For hop when behind a proxy.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return f"ip:{forwarded.split(',')[0].strip()}"
    return f"ip:{get_remote_address(request)}"

limiter = Limiter(key_func=client_ip)
