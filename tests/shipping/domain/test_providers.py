"""Tests for the shipping provider adapters and the provider selector."""

import asyncio
import random

import pytest
from shipping.delivery.delivery import CustomerInfo, DeliveryStatus, ShippingAddress
from shipping.delivery.exceptions import NoProviderAvailableError, ProviderUnavailableError
from shipping.providers.fake_adapter import FakePullProvider, FakePushProvider
from shipping.providers.nrw import NRWShippingProvider
from shipping.providers.port import ProviderType, PullProvider, PushProvider
from shipping.providers.selector import ProviderSelector
from shipping.providers.tls import TLSShippingProvider

ADDRESS = ShippingAddress(street="Main St 1", city="Berlin", zip_code="10115", country="DE")
CUSTOMER = CustomerInfo(name="Ana")


class _ExplodingProvider(FakePushProvider):
    async def is_available(self) -> bool:
        raise RuntimeError("health endpoint down")


class TestProviderKinds:
    def test_push_and_pull_types(self):
        assert FakePushProvider().provider_type() == ProviderType.PUSH
        assert FakePullProvider().provider_type() == ProviderType.PULL
        assert TLSShippingProvider().provider_type() == ProviderType.PUSH
        assert NRWShippingProvider().provider_type() == ProviderType.PULL

    def test_only_pull_providers_expose_tracking(self):
        assert not hasattr(TLSShippingProvider(), "get_tracking_status")
        assert isinstance(NRWShippingProvider(), PullProvider)
        assert isinstance(TLSShippingProvider(), PushProvider)

    def test_push_providers_accept_any_signature_by_default(self):
        assert TLSShippingProvider().verify_webhook_signature("{}", None) is True


class TestFakeProviders:
    def test_generate_label_success(self):
        provider = FakePullProvider()
        label = asyncio.run(provider.generate_label("ORDER-1", ADDRESS, CUSTOMER))
        assert label.provider == "FAKE-PULL"
        assert label.tracking_number.startswith("FAKE-")
        assert label.tracking_number in label.label_url
        assert provider.label_calls == ["ORDER-1"]

    def test_tracking_numbers_are_unique_per_call(self):
        provider = FakePushProvider()
        numbers = {asyncio.run(provider.generate_label("ORDER-1", ADDRESS, CUSTOMER)).tracking_number for _ in range(20)}
        assert len(numbers) == 20

    def test_generate_label_failure(self):
        provider = FakePushProvider()
        provider.configure(should_succeed=False, failure_reason="Label printer on fire")
        with pytest.raises(ProviderUnavailableError) as exc:
            asyncio.run(provider.generate_label("ORDER-1", ADDRESS, CUSTOMER))
        assert exc.value.message == "Label printer on fire"
        assert exc.value.provider == "FAKE-PUSH"

    def test_tracking_status_defaults_to_confirmed(self):
        status = asyncio.run(FakePullProvider().get_tracking_status("FAKE-1"))
        assert status.status == DeliveryStatus.CONFIRMED

    def test_tracking_status_follows_configuration(self):
        provider = FakePullProvider()
        provider.set_status("FAKE-1", DeliveryStatus.IN_TRANSIT)
        status = asyncio.run(provider.get_tracking_status("FAKE-1"))
        assert status.status == DeliveryStatus.IN_TRANSIT
        assert provider.tracking_calls == ["FAKE-1"]

    def test_tracking_failure_for_one_number(self):
        provider = FakePullProvider()
        provider.fail_tracking("FAKE-2")
        with pytest.raises(ProviderUnavailableError):
            asyncio.run(provider.get_tracking_status("FAKE-2"))
        assert asyncio.run(provider.get_tracking_status("FAKE-1")).status == DeliveryStatus.CONFIRMED


class TestSimulatedProviders:
    def test_nrw_label_shape(self):
        provider = NRWShippingProvider(rng=random.Random(7), latency=(0, 0))
        provider.LABEL_FAILURE_RATE = 0
        label = asyncio.run(provider.generate_label("ORDER-1", ADDRESS, CUSTOMER))
        assert label.provider == "NRW"
        assert label.tracking_number.startswith("NRW")
        assert label.label_url == f"https://api.nrw-shipping.com/labels/{label.tracking_number}.pdf"

    def test_tls_label_shape(self):
        provider = TLSShippingProvider(rng=random.Random(7), latency=(0, 0))
        provider.LABEL_FAILURE_RATE = 0
        label = asyncio.run(provider.generate_label("ORDER-1", ADDRESS, CUSTOMER))
        assert label.provider == "TLS"
        assert label.label_url == f"https://api.tls-logistics.com/shipping-labels/{label.tracking_number}.pdf"

    def test_nrw_label_failure(self):
        provider = NRWShippingProvider(rng=random.Random(7), latency=(0, 0))
        provider.LABEL_FAILURE_RATE = 1
        with pytest.raises(ProviderUnavailableError):
            asyncio.run(provider.generate_label("ORDER-1", ADDRESS, CUSTOMER))

    def test_nrw_reports_known_statuses(self):
        provider = NRWShippingProvider(rng=random.Random(11), latency=(0, 0))
        provider.TRACKING_FAILURE_RATE = 0
        statuses = {asyncio.run(provider.get_tracking_status("NRW1")).status for _ in range(50)}
        assert statuses <= {DeliveryStatus.CONFIRMED, DeliveryStatus.IN_TRANSIT, DeliveryStatus.DELIVERED}
        assert len(statuses) > 1

    def test_simulated_tracking_numbers_are_unique(self):
        provider = NRWShippingProvider(rng=random.Random(3), latency=(0, 0))
        provider.LABEL_FAILURE_RATE = 0
        numbers = {asyncio.run(provider.generate_label("ORDER-1", ADDRESS, CUSTOMER)).tracking_number for _ in range(25)}
        assert len(numbers) == 25


class TestProviderSelector:
    def test_selects_an_available_provider(self):
        pull, push = FakePullProvider(), FakePushProvider()
        push.configure(available=False)
        selector = ProviderSelector([pull, push])
        assert asyncio.run(selector.select_provider()) is pull

    def test_failing_availability_check_counts_as_unavailable(self):
        pull = FakePullProvider()
        selector = ProviderSelector([_ExplodingProvider(), pull])
        assert asyncio.run(selector.select_provider()) is pull

    def test_no_provider_available(self):
        pull, push = FakePullProvider(), FakePushProvider()
        pull.configure(available=False)
        push.configure(available=False)
        with pytest.raises(NoProviderAvailableError):
            asyncio.run(ProviderSelector([pull, push]).select_provider())

    def test_selection_is_spread_over_available_providers(self):
        pull, push = FakePullProvider(), FakePushProvider()
        selector = ProviderSelector([pull, push], rng=random.Random(5))
        chosen = {asyncio.run(selector.select_provider()).name() for _ in range(40)}
        assert chosen == {"FAKE-PULL", "FAKE-PUSH"}

    def test_all_providers_is_unfiltered_copy(self):
        pull, push = FakePullProvider(), FakePushProvider()
        push.configure(available=False)
        selector = ProviderSelector([pull, push])
        providers = selector.all_providers()
        providers.clear()
        assert selector.all_providers() == [pull, push]

    def test_find_by_name(self):
        pull = FakePullProvider()
        selector = ProviderSelector([pull])
        assert selector.find("FAKE-PULL") is pull
        assert selector.find("NRW") is None
