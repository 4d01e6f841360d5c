"""Tracking synchronization — one polling sweep over non-terminal deliveries.

Only pull providers are queried; deliveries labelled by a push provider, or
by a provider that is no longer configured, are skipped. A failed query is
recorded against its tracking number and never stops the sweep.
"""

from dataclasses import dataclass, field

import structlog
from protean.utils.globals import current_domain

from shipping.delivery.delivery import POLLABLE_STATUSES, Delivery
from shipping.delivery.status import UpdateDeliveryStatus
from shipping.providers.port import PullProvider
from shipping.providers.selector import ProviderSelector

logger = structlog.get_logger(__name__)


@dataclass
class SyncReport:
    examined: int = 0
    skipped: int = 0
    polled: int = 0
    updated: int = 0
    unchanged: int = 0
    failures: dict[str, str] = field(default_factory=dict)


class TrackingSynchronizer:
    def __init__(self, selector: ProviderSelector):
        self._selector = selector

    async def sync_once(self) -> SyncReport:
        report = SyncReport()
        deliveries = current_domain.repository_for(Delivery).find_by_status(POLLABLE_STATUSES)
        providers = {provider.name(): provider for provider in self._selector.all_providers()}

        for delivery in deliveries:
            report.examined += 1
            provider = providers.get(delivery.provider)
            if not isinstance(provider, PullProvider):
                report.skipped += 1
                continue

            try:
                await self._sync_delivery(delivery, provider, report)
            except Exception as exc:
                report.failures[delivery.tracking_number] = str(exc)
                logger.error(
                    "Tracking sync failed",
                    tracking_number=delivery.tracking_number,
                    provider=delivery.provider,
                    error=str(exc),
                )

        logger.info(
            "Tracking sync completed",
            examined=report.examined,
            updated=report.updated,
            failed=len(report.failures),
        )
        return report

    async def _sync_delivery(self, delivery: Delivery, provider: PullProvider, report: SyncReport) -> None:
        tracking = await provider.get_tracking_status(delivery.tracking_number)
        report.polled += 1

        if tracking.status.value == delivery.status:
            report.unchanged += 1
            return

        current_domain.process(
            UpdateDeliveryStatus(delivery_id=delivery.id, status=tracking.status.value),
            asynchronous=False,
        )
        report.updated += 1
        logger.info(
            "Delivery status synchronized",
            tracking_number=delivery.tracking_number,
            previous_status=delivery.status,
            new_status=tracking.status.value,
        )
