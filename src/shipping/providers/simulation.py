"""Latency and failure simulation shared by the reference provider adapters."""

import asyncio
import random


class SimulatedApi:
    """Randomized network behaviour of a remote carrier API.

    Pass a seeded ``random.Random`` and ``latency=(0, 0)`` for reproducible,
    instant runs.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        latency: tuple[float, float] = (0.01, 0.2),
    ):
        self.rng = rng or random.Random()
        self.latency = latency

    async def delay(self) -> None:
        low, high = self.latency
        if high <= 0:
            return
        await asyncio.sleep(self.rng.uniform(low, high))

    def happens(self, probability: float) -> bool:
        return self.rng.random() < probability

    def tracking_suffix(self) -> str:
        return f"{self.rng.randrange(1000):03d}"
