"""
Authentication Module

Resolves the calling tenant from JWT bearer tokens.
"""

from .dependencies import get_current_caller, get_current_tenant_id
from .models import CallerIdentity
from .security import create_access_token, decode_access_token

__all__ = [
    "CallerIdentity",
    "create_access_token",
    "decode_access_token",
    "get_current_caller",
    "get_current_tenant_id",
]
