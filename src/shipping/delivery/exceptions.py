"""Delivery error taxonomy.

Every workflow failure is a ``DeliveryError`` subclass carrying a stable
``code`` that the HTTP layer surfaces in error bodies. Malformed input is a
protean ``ValidationError``; ``FormatError`` is the identifier-specific kind.
"""

from protean.exceptions import ValidationError


class FormatError(ValidationError):
    """A raw identifier matched none of the accepted formats."""

    def __init__(self, message: str, field: str = "value"):
        super().__init__({field: [message]})
        self.message = message

    def __str__(self) -> str:
        return self.message


class DeliveryError(Exception):
    code = "DELIVERY_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class DuplicateOrderError(DeliveryError):
    code = "CONFLICT"


class DuplicateKeyError(DeliveryError):
    """The store refused a write that would duplicate a natural key."""

    code = "DUPLICATE_KEY"

    def __init__(self, message: str, key: str):
        super().__init__(message)
        self.key = key


class NoProviderAvailableError(DeliveryError):
    code = "SERVICE_UNAVAILABLE"


class ProviderUnavailableError(DeliveryError):
    code = "PROVIDER_UNAVAILABLE"

    def __init__(self, message: str, provider: str | None = None):
        super().__init__(message)
        self.provider = provider


class DeliveryNotFoundError(DeliveryError):
    code = "DELIVERY_NOT_FOUND"


class InvalidStatusError(DeliveryError):
    code = "INVALID_STATUS"


class NoStatusChangeError(DeliveryError):
    """The reported status equals the current one; nothing to write."""

    code = "NO_STATUS_CHANGE"


class InvalidSignatureError(DeliveryError):
    """Reserved for webhook authenticity enforcement."""

    code = "INVALID_SIGNATURE"
