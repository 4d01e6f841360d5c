"""Faker-based data generators for Locust load test scenarios.

Payloads pass the domain's validation rules (order id of at least three
characters, complete shipping address) and use the API's camelCase names.
"""

import uuid

from faker import Faker

fake = Faker()


def unique_order_id() -> str:
    """Order ids like 'ORD-LT-a1b2c3d4e5'."""
    return f"ORD-LT-{uuid.uuid4().hex[:10]}"


def shipping_address() -> dict:
    return {
        "street": fake.street_address(),
        "city": fake.city(),
        "state": fake.state(),
        "zipCode": fake.postcode(),
        "country": fake.country_code(),
    }


def customer_info() -> dict:
    return {
        "name": fake.name(),
        "email": fake.email(),
        "phone": fake.phone_number()[:50],
    }


def delivery_data() -> dict:
    return {
        "orderId": unique_order_id(),
        "shippingAddress": shipping_address(),
        "customerInfo": customer_info(),
    }


def webhook_data(tracking_number: str, status: str) -> dict:
    return {
        "trackingNumber": tracking_number,
        "status": status,
        "timestamp": fake.iso8601(),
    }
