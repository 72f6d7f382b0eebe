"""
Authentication Dependencies

FastAPI dependencies that turn the bearer token into an explicit tenant id.
Permission checks are enforced upstream; these only establish identity.
"""

from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from structlog import get_logger

from .models import CallerIdentity
from .security import decode_access_token

logger = get_logger()

# HTTP Bearer token authentication
security = HTTPBearer()


async def get_current_caller(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> CallerIdentity:
    """
    Get the caller identity from the JWT token.

    Args:
        credentials: Bearer token from Authorization header

    Returns:
        Caller identity

    Raises:
        HTTPException: If token is invalid or carries no tenant
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = decode_access_token(credentials.credentials)

    if not payload:
        logger.warning("invalid_token_decoded")
        raise credentials_exception

    tenant_id: Optional[str] = payload.get("tenant_id")
    if not tenant_id:
        logger.warning("invalid_token_payload", user_id=payload.get("user_id"))
        raise credentials_exception

    return CallerIdentity(
        tenant_id=tenant_id,
        user_id=payload.get("user_id"),
        role=payload.get("role"),
    )


async def get_current_tenant_id(
    caller: CallerIdentity = Depends(get_current_caller),
) -> str:
    """Tenant id of the authenticated caller."""
    return caller.tenant_id
