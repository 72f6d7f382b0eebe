"""
Tenant Account API Schemas

Request and response models for the tenant account endpoints.
"""

from typing import Any, Optional

from pydantic import ConfigDict, Field

from .models import ApiKeySummary, CamelModel, Tenant


class SettingsPatch(CamelModel):
    """Recognized ``settings`` leaves for a settings update."""

    timezone: Optional[str] = Field(default=None)
    language: Optional[str] = Field(default=None)


class BrandingPatch(CamelModel):
    """Recognized ``branding`` leaves for a settings update."""

    primary_color: Optional[str] = Field(default=None)
    logo_url: Optional[str] = Field(default=None)
    login_message: Optional[str] = Field(default=None)


# Leaves applied whenever present, so null or "" clears them
_CLEARABLE_LEAVES = {"branding.logo_url"}


class SettingsUpdateRequest(CamelModel):
    """
    Partial update of the tenant name, settings and branding.

    Only fields present in the request body are applied; every other
    settings/branding field on the stored tenant is left untouched.
    """

    name: Optional[str] = Field(default=None)
    settings: Optional[SettingsPatch] = Field(default=None)
    branding: Optional[BrandingPatch] = Field(default=None)

    def leaf_updates(self) -> dict[str, Any]:
        """
        Flatten the request into dotted leaf paths.

        Returns:
            Mapping such as ``{"name": ..., "settings.timezone": ...}`` limited
            to the fields the caller actually sent. Empty values are skipped
            except for the logo URL.
        """
        updates: dict[str, Any] = {}

        if self.name:
            updates["name"] = self.name

        for section in ("settings", "branding"):
            patch = getattr(self, section)
            if section not in self.model_fields_set or patch is None:
                continue
            for field in patch.model_fields_set:
                path = f"{section}.{field}"
                value = getattr(patch, field)
                if not value and path not in _CLEARABLE_LEAVES:
                    continue
                updates[path] = value

        return updates

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Acme",
                "settings": {"timezone": "UTC", "language": "en"},
                "branding": {
                    "primaryColor": "#fff",
                    "logoUrl": "http://x/y.png",
                    "loginMessage": "hi",
                },
            }
        }
    )


class IntegrationUpsertRequest(CamelModel):
    """Create or replace the credentials of one provider."""

    provider: str = Field(..., description="Provider name, unique within the tenant")
    api_key: str = Field(default="")
    active: bool = Field(default=False)


class WebhookCreateRequest(CamelModel):
    """Register an outbound webhook."""

    url: str = Field(..., description="Delivery URL")
    events: Optional[list[str]] = Field(default=None, description="Subscribed events")


class ApiKeyCreateRequest(CamelModel):
    """Mint a new API key."""

    name: Optional[str] = Field(default=None, description="Label shown in the dashboard")


class TenantResponse(Tenant):
    """Tenant as returned for display, with API key secrets removed."""

    api_keys: list[ApiKeySummary] = Field(default_factory=list)
