"""Shipping domain API package."""

import importlib

__all__ = ["delivery_router", "webhook_router", "register_shipping_exception_handlers"]

# Re-exports resolve lazily: protean's domain traversal loads the submodules
# below by file path, and eager imports here would read them half-initialized.
_EXPORTS = {
    "register_shipping_exception_handlers": "shipping.api.errors",
    "delivery_router": "shipping.api.routes",
    "webhook_router": "shipping.api.routes",
}


def __getattr__(name):
    if name in _EXPORTS:
        return getattr(importlib.import_module(_EXPORTS[name]), name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
