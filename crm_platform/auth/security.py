"""
Security Utilities

JWT token management for the bearer tokens that identify the calling tenant.
"""

from datetime import datetime, timedelta
from typing import Any, Optional

from jose import JWTError, jwt
from structlog import get_logger

from ..config import get_config

logger = get_logger()


def create_access_token(
    data: dict[str, Any],
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a JWT access token.

    Args:
        data: Data to encode in the token (must carry ``tenant_id``)
        expires_delta: Token expiration time (defaults to config value)

    Returns:
        Encoded JWT token
    """
    config = get_config()
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(hours=config.jwt_expiry_hours)

    to_encode.update({"exp": expire})

    return jwt.encode(
        to_encode,
        config.jwt_secret_key,
        algorithm=config.jwt_algorithm,
    )


def decode_access_token(token: str) -> Optional[dict[str, Any]]:
    """
    Decode and validate a JWT access token.

    Args:
        token: JWT token to decode

    Returns:
        Token payload if valid, None otherwise
    """
    config = get_config()
    try:
        return jwt.decode(
            token,
            config.jwt_secret_key,
            algorithms=[config.jwt_algorithm],
        )
    except JWTError as e:
        logger.warning("jwt_decode_error", error=str(e))
        return None
