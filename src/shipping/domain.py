"""Shipping bounded context — Delivery Lifecycle and Carrier Synchronization.

Tracks the shipment of a customer order from label generation with a
shipping provider through delivery. Provider state reaches the domain either
through inbound webhooks (push providers) or through periodic polling (pull
providers); both paths converge on a single status update handler.
"""

from protean.domain import Domain

shipping = Domain(name="shipping")
