from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyHeader
from .api_key import verify_api_key

# Defines the expected admin header
api_key_header = APIKeyHeader(name="X-Internal-API-Key", auto_error=False)

async def verify_admin_api_key(api_key: str = Depends(api_key_header)) -> bool:
    """Dependency to validate requests coming from the admin dashboard."""
    if not verify_api_key(api_key):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid or missing X-Internal-API-Key header"
        )
    return True
