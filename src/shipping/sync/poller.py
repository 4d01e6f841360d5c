"""Delivery poller — runs tracking sweeps on a fixed interval.

The poller owns its timer. Each sweep runs as its own task, so a slow sweep
never delays the next tick and sweeps may overlap. ``stop()`` cancels the
timer only; sweeps already running are left to finish. ``running_poller``
ties a poller to a block and drains its sweeps on exit.
"""

import asyncio
import os
from contextlib import asynccontextmanager

import structlog

from shipping.sync.tracking import SyncReport, TrackingSynchronizer

logger = structlog.get_logger(__name__)

DEFAULT_INTERVAL = 60.0


def interval_from_env() -> float:
    return float(os.environ.get("POLL_INTERVAL_SECONDS", DEFAULT_INTERVAL))


class DeliveryPoller:
    def __init__(self, synchronizer: TrackingSynchronizer, interval: float = DEFAULT_INTERVAL, domain=None):
        if interval <= 0:
            raise ValueError("Polling interval must be positive")
        self._synchronizer = synchronizer
        self._interval = interval
        self._domain = domain
        self._timer: asyncio.Task | None = None
        self._sweeps: set[asyncio.Task] = set()

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._timer is not None and not self._timer.done()

    @property
    def in_flight(self) -> int:
        return len(self._sweeps)

    def start(self) -> None:
        """Sweep now, then every ``interval`` seconds. Must be called inside a running loop."""
        if self.running:
            return
        self._timer = asyncio.get_running_loop().create_task(self._tick())
        logger.info("Delivery poller started", interval=self._interval)

    async def stop(self, wait: bool = False) -> None:
        """Cancel the timer. With ``wait``, also wait for in-flight sweeps."""
        if self._timer is not None:
            self._timer.cancel()
            try:
                await self._timer
            except asyncio.CancelledError:
                pass
            self._timer = None
            logger.info("Delivery poller stopped")

        if wait and self._sweeps:
            await asyncio.gather(*self._sweeps, return_exceptions=True)

    async def run_once(self) -> SyncReport:
        if self._domain is not None:
            with self._domain.domain_context():
                return await self._synchronizer.sync_once()
        return await self._synchronizer.sync_once()

    async def _tick(self) -> None:
        while True:
            sweep = asyncio.create_task(self._sweep())
            self._sweeps.add(sweep)
            sweep.add_done_callback(self._sweeps.discard)
            await asyncio.sleep(self._interval)

    async def _sweep(self) -> None:
        try:
            await self.run_once()
        except Exception as exc:
            logger.error("Polling sweep failed", error=str(exc))


@asynccontextmanager
async def running_poller(synchronizer: TrackingSynchronizer, interval: float | None = None, domain=None):
    """Run a poller for the duration of the block.

    On exit the timer is cancelled and in-flight sweeps are awaited, so no
    sweep outlives the block that started it.
    """
    poller = DeliveryPoller(
        synchronizer,
        interval=interval_from_env() if interval is None else interval,
        domain=domain,
    )
    poller.start()
    try:
        yield poller
    finally:
        await poller.stop(wait=True)
