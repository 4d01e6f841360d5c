"""Shipping providers — pluggable carrier integrations."""

import os

_selector_instance = None


def _build_provider(name: str):
    if name == "nrw":
        from shipping.providers.nrw import NRWShippingProvider

        return NRWShippingProvider()
    if name == "tls":
        from shipping.providers.tls import TLSShippingProvider

        return TLSShippingProvider()
    if name == "fake-pull":
        from shipping.providers.fake_adapter import FakePullProvider

        return FakePullProvider()
    if name == "fake-push":
        from shipping.providers.fake_adapter import FakePushProvider

        return FakePushProvider()
    raise ValueError(f"Unknown shipping provider: {name}")


def get_selector():
    """Return the configured provider selector (singleton).

    Providers are listed in the SHIPPING_PROVIDERS environment variable,
    comma-separated. Defaults to the NRW and TLS simulations.
    """
    global _selector_instance
    if _selector_instance is None:
        from shipping.providers.selector import ProviderSelector

        names = os.environ.get("SHIPPING_PROVIDERS", "nrw,tls")
        providers = [_build_provider(name.strip().lower()) for name in names.split(",") if name.strip()]
        if not providers:
            raise ValueError("SHIPPING_PROVIDERS names no providers")
        _selector_instance = ProviderSelector(providers)
    return _selector_instance


def set_selector(selector) -> None:
    """Install a specific selector (useful for testing)."""
    global _selector_instance
    _selector_instance = selector


def reset_selector():
    """Reset the selector singleton (useful for testing)."""
    global _selector_instance
    _selector_instance = None
