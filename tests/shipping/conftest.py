import asyncio

import pytest
from protean.integrations.pytest import DomainFixture
from shipping.delivery.ids import get_id_provider, reset_id_provider
from shipping.providers import reset_selector, set_selector
from shipping.providers.fake_adapter import FakePullProvider, FakePushProvider
from shipping.providers.selector import ProviderSelector

_ADDRESS = {
    "street": "Calle Mayor 1",
    "city": "Madrid",
    "state": "Madrid",
    "zip_code": "28013",
    "country": "ES",
}

_CUSTOMER = {
    "name": "Lucia Perez",
    "email": "lucia@example.com",
    "phone": "+34 600 000 000",
}


@pytest.fixture(scope="session")
def shipping_bed():
    from shipping.domain import shipping

    bed = DomainFixture(shipping)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(shipping_bed):
    with shipping_bed.domain_context():
        yield
    reset_selector()
    reset_id_provider()


@pytest.fixture()
def pull_provider():
    return FakePullProvider()


@pytest.fixture()
def push_provider():
    return FakePushProvider()


@pytest.fixture()
def selector(pull_provider, push_provider):
    """Selector over one fake pull and one fake push provider, installed as the registry default."""
    selector = ProviderSelector([pull_provider, push_provider])
    set_selector(selector)
    return selector


@pytest.fixture()
def id_provider():
    return get_id_provider()


@pytest.fixture()
def address():
    return dict(_ADDRESS)


@pytest.fixture()
def customer():
    return dict(_CUSTOMER)


@pytest.fixture()
def create_delivery(selector, id_provider, address, customer):
    """Create a delivery through the creation workflow and return its label."""
    from shipping.delivery.creation import DeliveryCreation

    def _create(order_id="ORDER-500"):
        creation = DeliveryCreation(selector, id_provider)
        return asyncio.run(creation.create(order_id, dict(address), dict(customer)))

    return _create
