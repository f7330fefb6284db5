import pytest
from protean.integrations.pytest import DomainFixture

TEST_SECRET = "test-pickup-secret"


@pytest.fixture(scope="session")
def delivery_bed():
    from delivery.domain import delivery

    bed = DomainFixture(delivery)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(delivery_bed):
    with delivery_bed.domain_context():
        yield


@pytest.fixture()
def settings():
    from delivery.config import DeliverySettings

    return DeliverySettings(
        pickup_token_secret=TEST_SECRET,
        environment="test",
        provider_timeout_seconds=0.5,
    )


@pytest.fixture(autouse=True)
def _active_settings(settings):
    """Install test settings and a fresh provider registry for every test."""
    from delivery.config import reset_settings, set_settings
    from delivery.provider import reset_registry

    set_settings(settings)
    reset_registry()
    yield
    reset_settings()
    reset_registry()


@pytest.fixture()
def fake_registry():
    """Registry where every delivering provider is a FakeProvider."""
    from delivery.provider import set_registry
    from delivery.provider.fake_adapter import FakeProvider
    from delivery.provider.registry import ProviderRegistry

    registry = ProviderRegistry.from_configs(adapter_factory=FakeProvider)
    set_registry(registry)
    return registry


@pytest.fixture()
def farm_location():
    """Farm in San Francisco."""
    return {"lat": 37.7749, "lng": -122.4194}


@pytest.fixture()
def order_context():
    from delivery.provider.port import ContactInfo, LineItem, OrderContext

    return OrderContext(
        order_id=1042,
        total_amount=37.5,
        customer=ContactInfo(name="Dana Whitfield", phone="+1-415-555-0142", address="500 Hayes St, San Francisco, CA"),
        farm=ContactInfo(name="Sunset Petal Farm", phone="+1-415-555-0199", address="1200 Great Hwy, San Francisco, CA"),
        items=(
            LineItem(name="Ranunculus bunch", quantity=2, price=12.5),
            LineItem(name="Sweet pea bouquet", quantity=1, price=12.5),
        ),
    )
