"""Shipping FastAPI application.

Serves the delivery and webhook APIs and, unless ``POLLER_ENABLED`` is
``false``, runs the tracking poller for the lifetime of the app.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

import os
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shipping.domain import shipping
from shipping.utils.logging import configure_logging

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# Initialized at module level so uvicorn workers share it.
configure_logging()
shipping.init()

logger = structlog.get_logger(__name__)


def _poller_enabled() -> bool:
    return os.environ.get("POLLER_ENABLED", "true").lower() not in ("0", "false", "no")


@asynccontextmanager
async def lifespan(app: FastAPI):
    from shipping.providers import get_selector
    from shipping.sync.poller import running_poller
    from shipping.sync.tracking import TrackingSynchronizer

    if not _poller_enabled():
        app.state.poller = None
        yield
        return

    # In-flight sweeps finish before the domain shuts down
    async with running_poller(TrackingSynchronizer(get_selector()), domain=shipping) as poller:
        app.state.poller = poller
        yield


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Shipping API",
    description="Delivery lifecycle: creation, status tracking, provider webhooks",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the shipping domain context for each request."""
    with shipping.domain_context():
        response = await call_next(request)
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from shipping.api import delivery_router, register_shipping_exception_handlers, webhook_router  # noqa: E402

app.include_router(delivery_router)
app.include_router(webhook_router)
register_shipping_exception_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    poller = getattr(app.state, "poller", None)
    return JSONResponse(
        content={
            "status": "ok",
            "domain": shipping.name,
            "poller": {
                "running": bool(poller and poller.running),
                "interval": poller.interval if poller else None,
            },
        }
    )
