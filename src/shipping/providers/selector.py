"""Provider selection — pick an available carrier for a new delivery."""

import asyncio
import random

import structlog

from shipping.delivery.exceptions import NoProviderAvailableError
from shipping.providers.port import ShippingProvider

logger = structlog.get_logger(__name__)


class ProviderSelector:
    """Chooses uniformly at random among the providers that report capacity.

    Availability is probed concurrently. A probe that raises counts as
    unavailable for this selection only.
    """

    def __init__(self, providers: list[ShippingProvider], rng: random.Random | None = None):
        self._providers = list(providers)
        self._rng = rng or random.Random()

    async def select_provider(self) -> ShippingProvider:
        results = await asyncio.gather(
            *(provider.is_available() for provider in self._providers),
            return_exceptions=True,
        )

        available = []
        for provider, result in zip(self._providers, results, strict=True):
            if isinstance(result, BaseException):
                logger.warning(
                    "Provider availability check failed",
                    provider=provider.name(),
                    error=str(result),
                )
            elif result:
                available.append(provider)

        if not available:
            raise NoProviderAvailableError("No shipping providers available")

        chosen = self._rng.choice(available)
        logger.info(
            "Shipping provider selected",
            provider=chosen.name(),
            available=[provider.name() for provider in available],
        )
        return chosen

    def all_providers(self) -> list[ShippingProvider]:
        return list(self._providers)

    def find(self, name: str) -> ShippingProvider | None:
        """Return the configured provider called ``name``, if any."""
        for provider in self._providers:
            if provider.name() == name:
                return provider
        return None
