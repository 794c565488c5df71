"""Shipment tracking FastAPI application.

Processes commands synchronously over HTTP. Shipment routes run inside the
shipping domain context; every request carries an X-Request-ID that is
echoed back and bound into the structured log context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# PROTEAN_ENV controls which config overlay is applied:
#   - "test"       → in-memory providers, sync event processing
#   - "production" → PostgreSQL, async event processing
from shipping.api.middleware import REQUEST_ID_HEADER, request_id_middleware
from shipping.domain import shipping
from shipping.utils.logging import get_logger

shipping.init()

logger = get_logger(__name__)
logger.info("domain_initialized", domain=shipping.name, env=os.environ.get("PROTEAN_ENV", "development"))


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Shipment Tracking API",
    description="Shipment lifecycle, milestone audit trail, ledger anchoring and delivery proofs",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[REQUEST_ID_HEADER],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the shipping domain context for shipment routes."""
    if request.url.path.startswith("/shipments"):
        with shipping.domain_context():
            return await call_next(request)
    return await call_next(request)


app.middleware("http")(request_id_middleware)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from shipping.api import register_exception_handlers, shipment_router  # noqa: E402

app.include_router(shipment_router)
register_exception_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": shipping.name})
