"""Delivery and order identifier value objects."""

import re

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import String

from shipping.delivery.exceptions import FormatError
from shipping.domain import shipping

_HEX24 = re.compile(r"^[0-9a-f]{24}$", re.IGNORECASE)
_UUID = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)
_ULID = re.compile(r"^[0-7][0-9A-HJKMNP-TV-Z]{25}$")


def is_valid_delivery_id(value) -> bool:
    """True when ``value`` is a 24-char hex id, an RFC-4122 UUID (v1-v5) or a ULID."""
    if not isinstance(value, str) or not value:
        return False
    return bool(_HEX24.match(value) or _UUID.match(value) or _ULID.match(value))


def _check_delivery_id(value) -> None:
    if not isinstance(value, str) or not value:
        raise FormatError("DeliveryId cannot be empty")
    if not is_valid_delivery_id(value):
        raise FormatError(f"DeliveryId format not supported: {value!r}")


@shipping.value_object
class DeliveryId:
    """Opaque delivery identifier.

    Accepted formats: document-store native ids (24 hex chars), UUIDs and
    ULIDs. ``from_string`` is the entry point for raw input and raises
    ``FormatError``; direct construction with a bad value fails validation.
    """

    value: String(max_length=36)

    @classmethod
    def from_string(cls, raw) -> "DeliveryId":
        _check_delivery_id(raw)
        return cls(value=raw)

    @invariant.post
    def value_must_be_a_supported_format(self):
        _check_delivery_id(self.value)

    def __str__(self) -> str:
        return self.value


@shipping.value_object
class OrderId:
    """Identifier of the originating order. At least 3 non-blank characters."""

    value: String(required=True, max_length=255)

    @invariant.post
    def value_must_not_be_blank(self):
        if not self.value or not self.value.strip():
            raise ValidationError({"order_id": ["OrderId cannot be empty"]})
        if len(self.value) < 3:
            raise ValidationError({"order_id": ["OrderId must be at least 3 characters long"]})

    def __str__(self) -> str:
        return self.value
