"""Repository for the Delivery aggregate.

Lookups return the aggregate or ``None`` and never raise for absence.
``save`` enforces the natural keys (order id, tracking number) across all
deliveries before handing the aggregate to the underlying store.
"""

from collections.abc import Iterable

from protean.exceptions import ObjectNotFoundError

from shipping.delivery.delivery import Delivery, DeliveryStatus
from shipping.delivery.exceptions import DuplicateKeyError
from shipping.domain import shipping


@shipping.repository(part_of=Delivery)
class DeliveryRepository:
    def save(self, delivery: Delivery) -> Delivery:
        """Persist a new or modified delivery.

        Raises ``DuplicateKeyError`` when another delivery already holds the
        same order id or tracking number.
        """
        for key, value, existing in (
            ("order_id", delivery.order_id, self.find_by_order_id(delivery.order_id)),
            ("tracking_number", delivery.tracking_number, self.find_by_tracking_number(delivery.tracking_number)),
        ):
            if existing is not None and existing.id != delivery.id:
                raise DuplicateKeyError(f"A delivery with {key} {value!r} already exists", key=key)

        self.add(delivery)
        return delivery

    def find_by_id(self, delivery_id) -> Delivery | None:
        try:
            return self.get(str(delivery_id))
        except ObjectNotFoundError:
            return None

    def find_by_order_id(self, order_id) -> Delivery | None:
        return self._first(order_id=str(order_id))

    def find_by_tracking_number(self, tracking_number: str) -> Delivery | None:
        return self._first(tracking_number=tracking_number)

    def find_by_status(self, statuses: Iterable[DeliveryStatus | str]) -> list[Delivery]:
        """All deliveries whose status is one of ``statuses``."""
        wanted = {DeliveryStatus(status).value for status in statuses}
        deliveries = []
        for status in sorted(wanted):
            deliveries.extend(self._dao.query.filter(status=status).limit(None).all().items)
        return deliveries

    def find_all(self) -> list[Delivery]:
        return self._dao.query.limit(None).all().items

    def _first(self, **filters) -> Delivery | None:
        results = self._dao.query.filter(**filters).all().items
        return results[0] if results else None
