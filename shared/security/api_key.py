"""
Admin endpoints are guarded by a shared key sent in X-Internal-API-Key.

If ADMIN_API_KEY is not set the app still starts, with a loud warning, so local
development works without a .env file while production misconfiguration is
clearly surfaced.
"""
import os
import secrets
import warnings

_ADMIN_API_KEY: str = os.getenv("ADMIN_API_KEY", "")

if not _ADMIN_API_KEY:
    warnings.warn(
        "ADMIN_API_KEY is not set. Using an insecure default. "
        "Set this env var in production!",
        stacklevel=2,
    )
    _ADMIN_API_KEY = "insecure-default-change-me"

ADMIN_API_KEY: str = _ADMIN_API_KEY


def verify_api_key(provided_key: str) -> bool:
    """Verify an API key using constant-time comparison to prevent timing attacks."""
    if not provided_key:
        return False
    return secrets.compare_digest(str(provided_key), str(ADMIN_API_KEY))
