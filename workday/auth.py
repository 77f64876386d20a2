import secrets

from fastapi import HTTPException, Security, status
from fastapi.security import APIKeyHeader

from workday.constants import API_KEY, API_KEY_HEADER

api_key_header = APIKeyHeader(name=API_KEY_HEADER, auto_error=False)


async def verify_api_key(api_key: str = Security(api_key_header)) -> str:
    """Reject requests to /api endpoints without the configured key"""
    if not api_key or not secrets.compare_digest(api_key, API_KEY):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid or missing {API_KEY_HEADER} header"
        )
    return api_key
