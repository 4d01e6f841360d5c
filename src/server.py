"""Standalone tracking poller for the shipping domain.

Runs the polling engine without the HTTP API, e.g. as a separate worker
process next to the webhook-facing web server.

Usage:
    python src/server.py                 # Poll every POLL_INTERVAL_SECONDS (default 60)
    python src/server.py --interval 15   # Poll every 15 seconds
    python src/server.py --once          # Run a single sweep and exit
"""

import argparse
import asyncio

import structlog

from shipping.domain import shipping
from shipping.providers import get_selector
from shipping.sync.poller import DeliveryPoller, interval_from_env
from shipping.sync.tracking import TrackingSynchronizer
from shipping.utils.logging import configure_logging

logger = structlog.get_logger(__name__)


async def run(interval: float, once: bool = False):
    shipping.init()
    poller = DeliveryPoller(TrackingSynchronizer(get_selector()), interval=interval, domain=shipping)

    if once:
        report = await poller.run_once()
        logger.info("Single sweep finished", **vars(report))
        return report

    poller.start()
    try:
        await asyncio.Event().wait()
    finally:
        await poller.stop(wait=True)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Shipping tracking poller")
    parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Seconds between sweeps (default: POLL_INTERVAL_SECONDS or 60)",
    )
    parser.add_argument("--once", action="store_true", help="Run one sweep and exit")
    args = parser.parse_args(argv)

    configure_logging()
    interval = args.interval if args.interval is not None else interval_from_env()

    try:
        asyncio.run(run(interval, once=args.once))
    except KeyboardInterrupt:
        logger.info("Poller interrupted")


if __name__ == "__main__":
    main()
