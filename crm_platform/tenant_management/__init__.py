"""
Tenant Management Module

Self-service account operations: settings, branding, integrations, webhooks and API keys.
"""

from .account_service import TenantAccountService
from .exceptions import ConcurrentModificationError, OperationFailedError, TenantNotFoundError
from .models import ApiKey, Integration, Tenant, TenantPlan, TenantStatus, Webhook
from .schema import (
    ApiKeyCreateRequest,
    IntegrationUpsertRequest,
    SettingsUpdateRequest,
    TenantResponse,
    WebhookCreateRequest,
)

__all__ = [
    "ApiKey",
    "ApiKeyCreateRequest",
    "ConcurrentModificationError",
    "Integration",
    "IntegrationUpsertRequest",
    "OperationFailedError",
    "SettingsUpdateRequest",
    "Tenant",
    "TenantAccountService",
    "TenantNotFoundError",
    "TenantPlan",
    "TenantResponse",
    "TenantStatus",
    "Webhook",
    "WebhookCreateRequest",
]
