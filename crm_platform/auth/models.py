"""
Authentication Models

Identity of the caller as established by the bearer token.
"""

from typing import Optional

from pydantic import BaseModel, Field


class CallerIdentity(BaseModel):
    """Claims extracted from a validated access token."""

    tenant_id: str = Field(..., description="Tenant the caller acts on")
    user_id: Optional[str] = Field(default=None)
    role: Optional[str] = Field(default=None)
