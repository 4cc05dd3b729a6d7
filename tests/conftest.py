import os
import sys
import pytest
from fastapi.testclient import TestClient

# Ensure project root is on sys.path for `import app`
_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if _ROOT not in sys.path:
    sys.path.insert(0, _ROOT)

from app.main import app
from app.api import deps
from app.core.config import Settings
from app.core.exceptions import ConfigurationError, ShopifyAPIError
from app.models.shopify import ShopifySession
from app.services.pacing import FixedIntervalPacer

SECRET = "s3cret"


def make_record(i: int, **overrides):
    data = {
        "name": f"Product {i}",
        "supplier": "Acme",
        "group": "Tools",
        "subCategory": "Hammers",
        "rate": 100 + i,
        "barcode": f"BC{i:04d}",
        "stock": 5,
        "mrp": 150,
        "images": [f"https://img.example.com/{i}.jpg"],
        "brand": "AcmeBrand",
        "suppdate": "2024-01-15",
        "suppinvo": f"INV-{i}",
        "value": 42,
    }
    data.update(overrides)
    return data


class FakeStore:
    def __init__(self, docs=None, connect_error=None):
        self.docs = list(docs or [])
        self.connect_error = connect_error
        self.connected = False
        self.fetch_calls = 0
        self.updates = []

    def connect(self):
        if self.connect_error:
            raise self.connect_error
        self.connected = True

    def test_connection(self) -> bool:
        return self.connect_error is None

    def fetch_products(self):
        self.fetch_calls += 1
        return [(doc_id, dict(data)) for doc_id, data in self.docs]

    def mark_migrated(self, record_id, shopify_id, migrated_at):
        self.updates.append((record_id, shopify_id, migrated_at))
        for doc_id, data in self.docs:
            if doc_id == record_id:
                data["shopifyId"] = shopify_id
                data["migratedAt"] = migrated_at


class FakeShopify:
    def __init__(self, events=None, session=True, fail_titles=(), fail_metafield_keys=()):
        self.events = events if events is not None else []
        self.session = session
        self.fail_titles = set(fail_titles)
        self.fail_metafield_keys = set(fail_metafield_keys)
        self.created_products = []
        self.created_metafields = []
        self.authenticate_calls = 0
        self._next_id = 1000

    async def authenticate(self):
        self.authenticate_calls += 1
        if not self.session:
            return None
        return ShopifySession(shop="https://test.myshopify.com", access_token="tok", api_version="2024-10")

    async def create_product(self, wrapper):
        title = wrapper.product.title
        self.events.append(("product", title))
        if title in self.fail_titles:
            raise ShopifyAPIError("Failed to create product", status_code=422, body="{}")
        self._next_id += 1
        self.created_products.append((self._next_id, wrapper))
        return self._next_id

    async def create_metafield(self, metafield):
        self.events.append(("metafield", metafield.owner_id, metafield.key))
        if metafield.key in self.fail_metafield_keys:
            raise ShopifyAPIError("Failed creating metafield", status_code=422, body="{}")
        self.created_metafields.append(metafield)
        return len(self.created_metafields)


class RecordingPacer(FixedIntervalPacer):
    def __init__(self, events):
        super().__init__(metafield_delay=0, record_delay=0, batch_delay=0)
        self.events = events

    async def after_metafield(self):
        self.events.append(("pause", "metafield"))

    async def after_record(self):
        self.events.append(("pause", "record"))

    async def after_batch(self):
        self.events.append(("pause", "batch"))


@pytest.fixture()
def events():
    return []


@pytest.fixture()
def test_settings():
    return Settings(
        migration_secret=SECRET,
        shopify_shop_url="test.myshopify.com",
        shopify_access_token="tok",
        migration_batch_size=10,
        migration_metafield_delay=0,
        migration_record_delay=0,
        migration_batch_delay=0,
    )


@pytest.fixture()
def fake_store():
    return FakeStore()


@pytest.fixture()
def fake_shopify(events):
    return FakeShopify(events=events)


@pytest.fixture()
def pacer(events):
    return RecordingPacer(events)


@pytest.fixture(autouse=True)
def _override_dependencies(test_settings, fake_store, fake_shopify, pacer):
    app.dependency_overrides[deps.get_settings] = lambda: test_settings
    app.dependency_overrides[deps.get_firestore_service] = lambda: fake_store
    app.dependency_overrides[deps.get_shopify_service] = lambda: fake_shopify
    app.dependency_overrides[deps.get_pacer] = lambda: pacer
    yield
    app.dependency_overrides.clear()


@pytest.fixture()
def client():
    return TestClient(app)


@pytest.fixture()
def missing_credentials_error():
    return ConfigurationError(
        "No Firebase credentials found. Set FIREBASE_SERVICE_ACCOUNT_PATH or "
        "FIREBASE_SERVICE_ACCOUNT_JSON in env."
    )


@pytest.fixture(scope="session")
def anyio_backend():
    # The services use asyncio primitives directly; run anyio tests on asyncio only.
    return "asyncio"
