"""Test fixtures and configuration."""

import copy
from dataclasses import dataclass

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from crm_platform.api_gateway.main import app
from crm_platform.auth.security import create_access_token
from crm_platform.tenant_management.account_service import TenantAccountService
from crm_platform.tenant_management.api_router import get_tenant_account_service
from crm_platform.tenant_management.db_service import TenantDBService
from crm_platform.tenant_management.models import ApiKey, Integration, Tenant, Webhook

TENANT_ID = "acme"


@dataclass
class FakeUpdateResult:
    matched_count: int
    modified_count: int


def _matches(document: dict, query: dict) -> bool:
    for key, value in query.items():
        if key == "$or":
            if not any(_matches(document, clause) for clause in value):
                return False
        elif isinstance(value, dict) and "$exists" in value:
            if (key in document) != value["$exists"]:
                return False
        elif document.get(key) != value:
            return False
    return True


def _exclude(document: dict, path: str) -> None:
    head, _, rest = path.partition(".")
    if head not in document:
        return
    if not rest:
        del document[head]
        return
    value = document[head]
    for item in value if isinstance(value, list) else [value]:
        if isinstance(item, dict):
            _exclude(item, rest)


class FakeCollection:
    """In-memory stand-in for the subset of AsyncIOMotorCollection the service uses."""

    def __init__(self):
        self.documents: list[dict] = []
        self.indexes = []

    def insert(self, document: dict) -> None:
        self.documents.append({"_id": ObjectId(), **copy.deepcopy(document)})

    async def find_one(self, query: dict, projection: dict | None = None):
        for document in self.documents:
            if _matches(document, query):
                result = copy.deepcopy(document)
                for path, include in (projection or {}).items():
                    if not include:
                        _exclude(result, path)
                return result
        return None

    async def replace_one(self, query: dict, replacement: dict) -> FakeUpdateResult:
        for index, document in enumerate(self.documents):
            if _matches(document, query):
                self.documents[index] = {"_id": document["_id"], **copy.deepcopy(replacement)}
                return FakeUpdateResult(matched_count=1, modified_count=1)
        return FakeUpdateResult(matched_count=0, modified_count=0)

    async def count_documents(self, query: dict, limit: int = 0) -> int:
        count = sum(1 for document in self.documents if _matches(document, query))
        return min(count, limit) if limit else count

    async def create_indexes(self, indexes):
        self.indexes.extend(indexes)
        return [str(i) for i in range(len(indexes))]


class FakeDatabase:
    """Dict-style database returning one FakeCollection per name."""

    def __init__(self):
        self.collections: dict[str, FakeCollection] = {}

    def __getitem__(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection())


def make_tenant(**overrides) -> Tenant:
    """Tenant with one integration, two webhooks and one API key."""
    fields = {
        "tenant_id": TENANT_ID,
        "name": "Acme Ltd",
        "slug": "acme",
        "integrations": [Integration(provider="stripe", api_key="sk_old", active=False)],
        "webhooks": [
            Webhook(url="https://hooks.acme.test/leads", events=["lead.created"], secret="whsec_one"),
            Webhook(url="https://hooks.acme.test/deals", events=["deal.won"], secret="whsec_two"),
        ],
        "api_keys": [
            ApiKey(key="nk_existing", name="CI", scopes=["full_access"], secret="apisec_existing")
        ],
    }
    fields.update(overrides)
    return Tenant(**fields)


@pytest.fixture
def fake_db() -> FakeDatabase:
    """Empty fake platform database."""
    return FakeDatabase()


@pytest.fixture
def tenants(fake_db) -> FakeCollection:
    """The tenants collection seeded with the default tenant."""
    collection = fake_db["tenants"]
    collection.insert(make_tenant().model_dump())
    return collection


@pytest.fixture
def db_service(fake_db, tenants) -> TenantDBService:
    """Tenant DB service over the seeded fake database (last write wins)."""
    return TenantDBService(fake_db, optimistic_locking=False)


@pytest.fixture
def account_service(db_service) -> TenantAccountService:
    """Account service over the seeded fake database."""
    return TenantAccountService(db_service)


@pytest.fixture
def client(account_service) -> TestClient:
    """Create a test client whose routes use the fake database."""
    app.dependency_overrides[get_tenant_account_service] = lambda: account_service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Return authorization headers for the seeded tenant."""
    token = create_access_token({"user_id": "user-1", "tenant_id": TENANT_ID, "role": "admin"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def tenant_id() -> str:
    """Id of the seeded tenant."""
    return TENANT_ID
