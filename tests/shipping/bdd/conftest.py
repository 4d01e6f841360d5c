"""Shared BDD fixtures and step definitions for the Shipping domain."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then
from shipping.delivery.delivery import Delivery


@pytest.fixture()
def outcome():
    """Container for the result or error of a `when` step."""
    return {"result": None, "exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("the shipping providers are available")
def providers_available(selector):
    return selector


@given("no shipping provider is available")
def providers_unavailable(selector, pull_provider, push_provider):
    pull_provider.configure(available=False)
    push_provider.configure(available=False)


@given(parsers.cfparse('a delivery exists for order "{order_id}"'))
def existing_delivery(create_delivery, order_id):
    return create_delivery(order_id)


@given("a confirmed delivery", target_fixture="label")
def confirmed_delivery(create_delivery):
    return create_delivery("ORDER-BDD-1")


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the delivery status is "{status}"'))
def delivery_status_is(label, status):
    assert current_domain.repository_for(Delivery).get(label.delivery_id).status == status


@then("no delivery is stored")
def no_delivery_stored():
    assert current_domain.repository_for(Delivery).find_all() == []
