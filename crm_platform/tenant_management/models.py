"""
Tenant Data Models

Defines the tenant aggregate stored in the platform database.

Documents are stored with snake_case field names; the API serializes the
same models with camelCase aliases (``apiKeys``, ``primaryColor``...).
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def _new_id() -> str:
    return uuid4().hex


class CamelModel(BaseModel):
    """Base model accepting snake_case or camelCase input and emitting camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        validate_default=True,
    )


class SubDocument(CamelModel):
    """
    Embedded document with a string id.

    Documents written by provisioning carry a BSON ``_id`` instead of ``id``;
    it is read as the id so that the value stays stable across loads.
    """

    id: str = Field(default_factory=_new_id, validation_alias=AliasChoices("id", "_id"))

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, value):
        return str(value)


class TenantPlan(str, Enum):
    """Subscription plans."""

    FREE = "free"
    STARTER = "starter"
    PROFESSIONAL = "professional"
    PRO = "pro"
    ENTERPRISE = "enterprise"


class TenantStatus(str, Enum):
    """Tenant account status."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    TRIAL = "trial"
    OVERDUE = "overdue"  # Payment pending


# Per-plan ceilings for countable resources
PLAN_LIMITS: dict[str, dict[str, int]] = {
    TenantPlan.FREE.value: {"users": 2, "leads": 100},
    TenantPlan.STARTER.value: {"users": 5, "leads": 500},
    TenantPlan.PROFESSIONAL.value: {"users": 25, "leads": 5000},
    TenantPlan.PRO.value: {"users": 25, "leads": 5000},
    TenantPlan.ENTERPRISE.value: {"users": 9999, "leads": 999999},
}


class TenantSettings(CamelModel):
    """Regional preferences for the tenant workspace."""

    language: str = Field(default="pt-BR")
    timezone: str = Field(default="America/Sao_Paulo")
    date_format: str = Field(default="DD/MM/YYYY")
    currency: str = Field(default="BRL")


class TenantBranding(CamelModel):
    """Tenant white-label branding."""

    logo_url: Optional[str] = Field(default=None, description="URL to tenant logo")
    favicon_url: Optional[str] = Field(default=None, description="URL to tenant favicon")
    primary_color: str = Field(default="#6366f1", description="Primary brand color (hex)")
    secondary_color: str = Field(default="#a855f7", description="Secondary brand color (hex)")
    company_name: Optional[str] = Field(default=None)
    login_message: str = Field(default="Bem-vindo ao seu CRM")


class PipelineStage(SubDocument):
    """A column of the tenant's sales pipeline."""

    name: str
    color: str = Field(default="#6366f1")
    order: int = Field(default=0)


def default_pipeline_stages() -> list[PipelineStage]:
    """Stages seeded on every new tenant."""
    stages = [
        ("Novo", "#6366f1"),
        ("Primeiro Contato", "#3b82f6"),
        ("Qualificação", "#a855f7"),
        ("Proposta", "#f59e0b"),
        ("Negociação", "#f97316"),
        ("Ganho", "#22c55e"),
        ("Perdido", "#ef4444"),
    ]
    return [PipelineStage(name=name, color=color, order=order) for order, (name, color) in enumerate(stages)]


class Integration(SubDocument):
    """Third-party provider credentials. ``provider`` is unique within a tenant."""

    provider: str
    api_key: str = Field(default="")
    api_secret: str = Field(default="")
    active: bool = Field(default=False)
    webhook_url: Optional[str] = Field(default=None)
    metadata: dict[str, str] = Field(default_factory=dict)


class Webhook(SubDocument):
    """Outbound webhook subscription."""

    url: str
    events: list[str] = Field(default_factory=list)
    active: bool = Field(default=True)
    is_active: bool = Field(default=True)
    secret: Optional[str] = Field(default=None, description="Signing secret, set once at creation")
    created_at: datetime = Field(default_factory=datetime.utcnow)


class ApiKeySummary(SubDocument):
    """API key metadata safe for display."""

    name: str = Field(default="Chave Padrão")
    scopes: list[str] = Field(default_factory=list)
    last_used: Optional[datetime] = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.utcnow)


class ApiKey(ApiKeySummary):
    """API key including its secret-bearing fields."""

    key: str
    secret: Optional[str] = Field(default=None)


# Fields stripped from api_keys whenever the tenant is read for display
API_KEY_SECRET_FIELDS = ("key", "secret")


class TenantBilling(CamelModel):
    """Billing state mirrored from the payment provider."""

    next_invoice_date: Optional[datetime] = Field(default=None)
    payment_method: Optional[str] = Field(default=None)
    last_payment_status: Optional[str] = Field(default=None)


class TenantUsage(CamelModel):
    """Usage counters maintained by the rest of the CRM."""

    users_count: int = Field(default=0)
    leads_count: int = Field(default=0)
    messages_count: int = Field(default=0)
    storage_used_mb: float = Field(default=0)


class Tenant(CamelModel):
    """
    Tenant aggregate representing one customer organization.

    Created by provisioning outside this service; handlers here only read
    it and mutate its sub-collections.
    """

    tenant_id: str = Field(..., description="Unique tenant identifier")
    name: str = Field(..., description="Tenant display name")
    slug: Optional[str] = Field(default=None)
    email: Optional[str] = Field(default=None)
    phone: Optional[str] = Field(default=None)

    plan: TenantPlan = Field(default=TenantPlan.FREE)
    status: TenantStatus = Field(default=TenantStatus.ACTIVE)
    trial_ends_at: Optional[datetime] = Field(default=None)
    owner_id: Optional[str] = Field(default=None)

    settings: TenantSettings = Field(default_factory=TenantSettings)
    branding: TenantBranding = Field(default_factory=TenantBranding)
    pipeline_stages: list[PipelineStage] = Field(default_factory=default_pipeline_stages)

    integrations: list[Integration] = Field(default_factory=list)
    webhooks: list[Webhook] = Field(default_factory=list)
    api_keys: list[ApiKey] = Field(default_factory=list)

    billing: TenantBilling = Field(default_factory=TenantBilling)
    usage: TenantUsage = Field(default_factory=TenantUsage)

    # Bumped on every save; compared on write when optimistic locking is enabled
    version: int = Field(default=0)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    def is_within_plan_limits(self, resource: str) -> bool:
        """
        Check whether the tenant may create another ``resource``.

        Only "users" and "leads" are metered; anything else is always allowed.
        Called by the user and lead modules of the CRM before they create records.
        """
        limits = PLAN_LIMITS.get(TenantPlan(self.plan).value, PLAN_LIMITS[TenantPlan.FREE.value])
        if resource == "users":
            return self.usage.users_count < limits["users"]
        if resource == "leads":
            return self.usage.leads_count < limits["leads"]
        return True
