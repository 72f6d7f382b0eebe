"""
Tenant Account Service

Self-service operations a tenant performs on its own account: settings and
branding, integrations, webhooks and API keys.

Every operation loads the tenant document, applies one local mutation and
saves the whole document back. The tenant id is always passed in explicitly
by the calling layer.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

from structlog import get_logger

from ..config import get_config
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
from .tokens import generate_api_key, generate_webhook_secret

logger = get_logger()

FULL_ACCESS_SCOPE = "full_access"


class TenantAccountService:
    """Load-mutate-save workflows over a single tenant document."""

    def __init__(self, tenant_db_service: Optional[TenantDBService] = None):
        """
        Initialize account service.

        Args:
            tenant_db_service: Optional tenant DB service instance
        """
        self.tenant_db_service = tenant_db_service or TenantDBService()

    @contextmanager
    def _operation(self, operation: str, tenant_id: str) -> Iterator[None]:
        """Report every failure as OperationFailedError, except version conflicts."""
        try:
            yield
        except ConcurrentModificationError:
            raise
        except Exception as e:
            logger.error("tenant_operation_failed", operation=operation, tenant_id=tenant_id, error=str(e))
            raise OperationFailedError(str(e)) from e

    async def _load(self, tenant_id: str) -> Tenant:
        tenant = await self.tenant_db_service.get_tenant_by_id(tenant_id)
        if tenant is None:
            raise TenantNotFoundError(tenant_id)
        return tenant

    async def get_current(self, tenant_id: str) -> TenantResponse:
        """
        Get the caller's tenant with API key secrets removed.

        Raises:
            TenantNotFoundError: If no tenant has this id
            OperationFailedError: On storage failure
        """
        with self._operation("get_current", tenant_id):
            tenant = await self.tenant_db_service.get_tenant_for_display(tenant_id)

        if tenant is None:
            raise TenantNotFoundError(tenant_id)
        return tenant

    async def update_settings(self, tenant_id: str, request: SettingsUpdateRequest) -> Tenant:
        """
        Merge the recognized name/settings/branding leaves into the tenant.

        Fields absent from the request keep their stored values.
        """
        updates = request.leaf_updates()

        with self._operation("update_settings", tenant_id):
            tenant = await self._load(tenant_id)
            for path, value in updates.items():
                *parents, leaf = path.split(".")
                target = tenant
                for attr in parents:
                    target = getattr(target, attr)
                setattr(target, leaf, value)
            tenant = await self.tenant_db_service.save_tenant(tenant)

        logger.info("tenant_settings_updated", tenant_id=tenant_id, fields=list(updates.keys()))
        return tenant

    async def upsert_integration(
        self, tenant_id: str, request: IntegrationUpsertRequest
    ) -> list[Integration]:
        """
        Create or update the integration for ``request.provider``.

        An existing entry keeps its position and only has api_key and active
        overwritten. The first matching provider wins.
        """
        with self._operation("upsert_integration", tenant_id):
            tenant = await self._load(tenant_id)

            existing = next(
                (i for i in tenant.integrations if i.provider == request.provider), None
            )
            if existing is not None:
                existing.api_key = request.api_key
                existing.active = request.active
            else:
                tenant.integrations.append(
                    Integration(
                        provider=request.provider,
                        api_key=request.api_key,
                        active=request.active,
                    )
                )

            tenant = await self.tenant_db_service.save_tenant(tenant)

        logger.info(
            "integration_upserted",
            tenant_id=tenant_id,
            provider=request.provider,
            created=existing is None,
        )
        return tenant.integrations

    async def add_webhook(self, tenant_id: str, request: WebhookCreateRequest) -> list[Webhook]:
        """
        Register a webhook with a freshly generated signing secret.

        Returns the full webhook list, secrets included.
        """
        events = request.events if request.events is not None else list(get_config().default_webhook_events)

        with self._operation("add_webhook", tenant_id):
            tenant = await self._load(tenant_id)
            webhook = Webhook(
                url=request.url,
                events=events,
                active=True,
                is_active=True,
                secret=generate_webhook_secret(),
            )
            tenant.webhooks.append(webhook)
            tenant = await self.tenant_db_service.save_tenant(tenant)

        logger.info("webhook_added", tenant_id=tenant_id, webhook_id=webhook.id, events=events)
        return tenant.webhooks

    async def remove_webhook(self, tenant_id: str, webhook_id: str) -> list[Webhook]:
        """
        Remove the webhook whose id equals ``webhook_id``.

        Unknown ids leave the list unchanged and are not an error.
        """
        with self._operation("remove_webhook", tenant_id):
            tenant = await self._load(tenant_id)
            before = len(tenant.webhooks)
            tenant.webhooks = [w for w in tenant.webhooks if str(w.id) != webhook_id]
            tenant = await self.tenant_db_service.save_tenant(tenant)

        logger.info(
            "webhook_removed",
            tenant_id=tenant_id,
            webhook_id=webhook_id,
            removed=before - len(tenant.webhooks),
        )
        return tenant.webhooks

    async def generate_api_key(
        self, tenant_id: str, request: Optional[ApiKeyCreateRequest] = None
    ) -> list[ApiKey]:
        """
        Mint a full-access API key.

        Returns the full key list including the key values, unlike get_current.
        """
        name = (request.name if request else None) or get_config().default_api_key_name

        with self._operation("generate_api_key", tenant_id):
            tenant = await self._load(tenant_id)
            api_key = ApiKey(key=generate_api_key(), name=name, scopes=[FULL_ACCESS_SCOPE])
            tenant.api_keys.append(api_key)
            tenant = await self.tenant_db_service.save_tenant(tenant)

        # Never log the key itself
        logger.info("api_key_generated", tenant_id=tenant_id, api_key_id=api_key.id, name=name)
        return tenant.api_keys
