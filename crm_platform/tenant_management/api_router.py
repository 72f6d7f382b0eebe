"""
Tenant Account API Router

REST API endpoints a tenant uses to manage its own account.
"""

from typing import NoReturn, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Request, status
from structlog import get_logger

from ..auth.dependencies import get_current_tenant_id
from .account_service import TenantAccountService
from .db_service import TenantDBService
from .exceptions import ConcurrentModificationError, OperationFailedError, TenantNotFoundError
from .models import ApiKey, Integration, Tenant, Webhook
from .schema import (
    ApiKeyCreateRequest,
    IntegrationUpsertRequest,
    SettingsUpdateRequest,
    TenantResponse,
    WebhookCreateRequest,
)

logger = get_logger()

router = APIRouter(prefix="/api/tenants", tags=["Tenant Account"])


def get_tenant_account_service(request: Request) -> TenantAccountService:
    """Dependency to get the account service bound to the platform database."""
    return TenantAccountService(TenantDBService(request.app.state.platform_db))


def _raise_for(error: Exception, tenant_id: str) -> NoReturn:
    if isinstance(error, TenantNotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    if isinstance(error, ConcurrentModificationError):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(error))
    logger.error("tenant_request_failed", tenant_id=tenant_id, error=str(error))
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(error))


@router.get(
    "/current",
    response_model=TenantResponse,
    summary="Get current tenant",
    description="Retrieve the caller's tenant with API key secrets removed",
)
async def get_current_tenant(
    tenant_id: str = Depends(get_current_tenant_id),
    account_service: TenantAccountService = Depends(get_tenant_account_service),
) -> TenantResponse:
    """Get the caller's tenant."""
    try:
        return await account_service.get_current(tenant_id)
    except (TenantNotFoundError, OperationFailedError) as e:
        _raise_for(e, tenant_id)


@router.put(
    "/settings",
    response_model=Tenant,
    summary="Update settings",
    description="Update tenant name, regional settings and branding",
)
async def update_settings(
    request: SettingsUpdateRequest,
    tenant_id: str = Depends(get_current_tenant_id),
    account_service: TenantAccountService = Depends(get_tenant_account_service),
) -> Tenant:
    """Merge the submitted settings into the tenant."""
    try:
        return await account_service.update_settings(tenant_id, request)
    except (OperationFailedError, ConcurrentModificationError) as e:
        _raise_for(e, tenant_id)


@router.post(
    "/integrations",
    response_model=list[Integration],
    summary="Upsert integration",
    description="Create or update the credentials for one provider",
)
async def upsert_integration(
    request: IntegrationUpsertRequest,
    tenant_id: str = Depends(get_current_tenant_id),
    account_service: TenantAccountService = Depends(get_tenant_account_service),
) -> list[Integration]:
    """Upsert an integration by provider."""
    try:
        return await account_service.upsert_integration(tenant_id, request)
    except (OperationFailedError, ConcurrentModificationError) as e:
        _raise_for(e, tenant_id)


@router.post(
    "/webhooks",
    response_model=list[Webhook],
    summary="Add webhook",
    description="Register a webhook; the response includes its signing secret",
)
async def add_webhook(
    request: WebhookCreateRequest,
    tenant_id: str = Depends(get_current_tenant_id),
    account_service: TenantAccountService = Depends(get_tenant_account_service),
) -> list[Webhook]:
    """Add a webhook subscription."""
    try:
        return await account_service.add_webhook(tenant_id, request)
    except (OperationFailedError, ConcurrentModificationError) as e:
        _raise_for(e, tenant_id)


@router.delete(
    "/webhooks/{webhook_id}",
    response_model=list[Webhook],
    summary="Remove webhook",
    description="Remove a webhook subscription; unknown ids are ignored",
)
async def remove_webhook(
    webhook_id: str,
    tenant_id: str = Depends(get_current_tenant_id),
    account_service: TenantAccountService = Depends(get_tenant_account_service),
) -> list[Webhook]:
    """Remove a webhook subscription."""
    try:
        return await account_service.remove_webhook(tenant_id, webhook_id)
    except (OperationFailedError, ConcurrentModificationError) as e:
        _raise_for(e, tenant_id)


@router.post(
    "/apikeys",
    response_model=list[ApiKey],
    summary="Generate API key",
    description="Mint a full-access API key; the response includes the key values",
)
async def generate_api_key(
    request: Optional[ApiKeyCreateRequest] = Body(default=None),
    tenant_id: str = Depends(get_current_tenant_id),
    account_service: TenantAccountService = Depends(get_tenant_account_service),
) -> list[ApiKey]:
    """Generate an API key."""
    try:
        return await account_service.generate_api_key(tenant_id, request)
    except (OperationFailedError, ConcurrentModificationError) as e:
        _raise_for(e, tenant_id)
