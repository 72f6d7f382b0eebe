"""
Tenant Database Service

Handles database operations for tenant documents in the platform database.
"""

from datetime import datetime
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, IndexModel
from structlog import get_logger

from ..config import get_config
from .exceptions import ConcurrentModificationError, TenantNotFoundError
from .models import API_KEY_SECRET_FIELDS, Tenant
from .schema import TenantResponse

logger = get_logger()


class TenantDBService:
    """
    Database service for tenant documents.

    Every write replaces the whole tenant document. With optimistic locking
    enabled the replace only matches the version that was loaded.
    """

    def __init__(
        self,
        db: Optional[AsyncIOMotorDatabase] = None,
        optimistic_locking: Optional[bool] = None,
    ):
        """
        Initialize tenant database service.

        Args:
            db: Optional database instance. If not provided, creates new connection.
            optimistic_locking: Override for the configured locking mode
        """
        config = get_config()
        if db is None:
            client = AsyncIOMotorClient(config.platform_mongo_db_url)
            self.db = client[config.platform_mongo_db_name]
        else:
            self.db = db

        self.collection = self.db[config.tenants_collection_name]
        self.optimistic_locking = (
            config.enable_optimistic_locking if optimistic_locking is None else optimistic_locking
        )

    async def ensure_indexes(self) -> None:
        """Create necessary indexes for tenant collection."""
        indexes = [
            IndexModel([("tenant_id", ASCENDING)], unique=True),
            IndexModel([("slug", ASCENDING)], unique=True, sparse=True),
            IndexModel([("status", ASCENDING)]),
        ]
        await self.collection.create_indexes(indexes)

    async def get_tenant_by_id(self, tenant_id: str) -> Optional[Tenant]:
        """
        Get tenant by ID.

        Args:
            tenant_id: Tenant identifier

        Returns:
            Tenant if found, None otherwise
        """
        tenant_dict = await self.collection.find_one({"tenant_id": tenant_id})
        if tenant_dict:
            return Tenant(**tenant_dict)
        return None

    async def get_tenant_for_display(self, tenant_id: str) -> Optional[TenantResponse]:
        """
        Get tenant by ID with API key secrets projected out.

        Args:
            tenant_id: Tenant identifier

        Returns:
            Redacted tenant if found, None otherwise
        """
        projection = {f"api_keys.{field}": 0 for field in API_KEY_SECRET_FIELDS}
        tenant_dict = await self.collection.find_one({"tenant_id": tenant_id}, projection)
        if tenant_dict:
            return TenantResponse(**tenant_dict)
        return None

    async def save_tenant(self, tenant: Tenant) -> Tenant:
        """
        Persist the whole tenant document.

        Args:
            tenant: Tenant loaded and mutated by the caller

        Returns:
            The saved tenant with its version and updated_at advanced

        Raises:
            TenantNotFoundError: If the document no longer exists
            ConcurrentModificationError: If locking is on and the stored version moved
        """
        loaded_version = tenant.version
        tenant.version = loaded_version + 1
        tenant.updated_at = datetime.utcnow()

        query: dict = {"tenant_id": tenant.tenant_id}
        if self.optimistic_locking:
            if loaded_version == 0:
                # Provisioned documents may predate the version field
                query["$or"] = [{"version": 0}, {"version": {"$exists": False}}]
            else:
                query["version"] = loaded_version

        result = await self.collection.replace_one(query, tenant.model_dump())

        if result.matched_count == 0:
            if self.optimistic_locking and await self.tenant_exists(tenant.tenant_id):
                logger.warning(
                    "tenant_version_conflict",
                    tenant_id=tenant.tenant_id,
                    expected_version=loaded_version,
                )
                raise ConcurrentModificationError(tenant.tenant_id, loaded_version)
            raise TenantNotFoundError(tenant.tenant_id)

        return tenant

    async def tenant_exists(self, tenant_id: str) -> bool:
        """
        Check if tenant exists.

        Args:
            tenant_id: Tenant identifier

        Returns:
            True if exists, False otherwise
        """
        count = await self.collection.count_documents({"tenant_id": tenant_id}, limit=1)
        return count > 0
