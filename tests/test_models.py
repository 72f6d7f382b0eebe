"""Tests for tenant models, request schemas and credential helpers."""

import pytest
from pydantic import ValidationError

from crm_platform.config import Environment, PlatformConfig
from crm_platform.tenant_management.models import Tenant, TenantPlan, TenantUsage
from crm_platform.tenant_management.schema import SettingsUpdateRequest, TenantResponse
from crm_platform.tenant_management.tokens import generate_api_key, generate_webhook_secret


class TestTenantModel:
    """Tenant aggregate defaults and serialization."""

    def test_defaults(self):
        tenant = Tenant(tenant_id="t1", name="T1")

        assert tenant.plan == "free"
        assert tenant.status == "active"
        assert tenant.settings.language == "pt-BR"
        assert tenant.branding.login_message == "Bem-vindo ao seu CRM"
        assert [s.name for s in tenant.pipeline_stages][0] == "Novo"
        assert [s.order for s in tenant.pipeline_stages] == list(range(7))
        assert tenant.integrations == [] and tenant.webhooks == [] and tenant.api_keys == []

    def test_accepts_camel_case_and_stores_snake_case(self):
        tenant = Tenant.model_validate(
            {"tenantId": "t1", "name": "T1", "branding": {"primaryColor": "#000"}}
        )

        assert tenant.branding.primary_color == "#000"
        assert "primary_color" in tenant.model_dump()["branding"]
        assert "primaryColor" in tenant.model_dump(by_alias=True)["branding"]

    def test_response_model_drops_api_key_secrets(self):
        tenant = Tenant(
            tenant_id="t1",
            name="T1",
            api_keys=[{"key": "nk_x", "secret": "s", "name": "Main", "scopes": ["full_access"]}],
        )

        response = TenantResponse(**tenant.model_dump())

        assert set(response.model_dump()["api_keys"][0]) == {
            "id",
            "name",
            "scopes",
            "last_used",
            "created_at",
        }


class TestPlanLimits:
    """Per-plan resource ceilings."""

    @pytest.mark.parametrize(
        "plan,users,leads",
        [
            (TenantPlan.FREE, 2, 100),
            (TenantPlan.STARTER, 5, 500),
            (TenantPlan.PROFESSIONAL, 25, 5000),
            (TenantPlan.PRO, 25, 5000),
            (TenantPlan.ENTERPRISE, 9999, 999999),
        ],
    )
    def test_limits_per_plan(self, plan, users, leads):
        below = Tenant(
            tenant_id="t1", name="T1", plan=plan, usage=TenantUsage(users_count=users - 1, leads_count=leads - 1)
        )
        at = Tenant(
            tenant_id="t1", name="T1", plan=plan, usage=TenantUsage(users_count=users, leads_count=leads)
        )

        assert below.is_within_plan_limits("users") is True
        assert below.is_within_plan_limits("leads") is True
        assert at.is_within_plan_limits("users") is False
        assert at.is_within_plan_limits("leads") is False

    def test_unmetered_resource_is_always_allowed(self):
        tenant = Tenant(tenant_id="t1", name="T1", usage=TenantUsage(messages_count=10**6))

        assert tenant.is_within_plan_limits("messages") is True


class TestSettingsUpdateRequest:
    """Flattening the partial update into leaf paths."""

    def test_only_sent_leaves_are_returned(self):
        request = SettingsUpdateRequest.model_validate(
            {"settings": {"language": "en"}, "branding": {"loginMessage": "hi"}}
        )

        assert request.leaf_updates() == {
            "settings.language": "en",
            "branding.login_message": "hi",
        }

    def test_empty_request_has_no_updates(self):
        assert SettingsUpdateRequest().leaf_updates() == {}

    def test_nulls_are_ignored_except_logo(self):
        request = SettingsUpdateRequest.model_validate(
            {"name": None, "settings": {"timezone": None}, "branding": {"logoUrl": None}}
        )

        assert request.leaf_updates() == {"branding.logo_url": None}

    def test_empty_strings_are_ignored_except_logo(self):
        request = SettingsUpdateRequest.model_validate(
            {
                "name": "",
                "settings": {"timezone": "", "language": ""},
                "branding": {"primaryColor": "", "loginMessage": "", "logoUrl": ""},
            }
        )

        assert request.leaf_updates() == {"branding.logo_url": ""}

    def test_unrecognized_fields_are_ignored(self):
        request = SettingsUpdateRequest.model_validate(
            {"branding": {"secondaryColor": "#123456"}, "plan": "enterprise"}
        )

        assert request.leaf_updates() == {}


class TestCredentials:
    """Webhook secrets and API keys."""

    def test_api_key_has_prefix_and_entropy(self):
        keys = {generate_api_key() for _ in range(50)}

        assert len(keys) == 50
        assert all(k.startswith("nk_") and len(k) >= 3 + 32 for k in keys)

    def test_webhook_secret_is_url_safe(self):
        secret = generate_webhook_secret()

        assert len(secret) >= 32
        assert all(c.isalnum() or c in "-_" for c in secret)


class TestConfig:
    """Platform configuration."""

    def test_default_secret_rejected_outside_local(self):
        with pytest.raises(ValidationError):
            PlatformConfig(environment=Environment.PROD, jwt_secret_key="change-me-in-production")

    def test_origins_parsed_outside_local(self):
        config = PlatformConfig(
            environment=Environment.DEV,
            jwt_secret_key="s3cret",
            allowed_origins="https://a.test, https://b.test",
        )

        assert config.get_allowed_origins_list() == ["https://a.test", "https://b.test"]
        assert config.enable_optimistic_locking is False
