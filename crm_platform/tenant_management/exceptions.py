"""
Tenant Account Errors

Domain errors raised by the tenant account service and mapped to HTTP
status codes by the API router.
"""


class TenantAccountError(Exception):
    """Base class for tenant account failures."""


class TenantNotFoundError(TenantAccountError):
    """No tenant document matches the requested id."""

    def __init__(self, tenant_id: str):
        self.tenant_id = tenant_id
        super().__init__(f"Tenant '{tenant_id}' not found")


class OperationFailedError(TenantAccountError):
    """Any storage or runtime failure while loading, mutating or saving a tenant."""


class ConcurrentModificationError(TenantAccountError):
    """The tenant changed between load and save (optimistic locking only)."""

    def __init__(self, tenant_id: str, expected_version: int):
        self.tenant_id = tenant_id
        self.expected_version = expected_version
        super().__init__(
            f"Tenant '{tenant_id}' was modified concurrently (expected version {expected_version})"
        )
