"""FarmDirect Delivery FastAPI application.

Serves delivery quotes, pickup QR codes and dispatch for the marketplace
checkout. Every request under /delivery runs inside the delivery domain
context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from delivery.config import get_settings
from delivery.domain import delivery
from delivery.utils.logging import add_context, clear_context

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# Settings load first so a missing pickup token secret outside development
# stops the process before it serves traffic.
settings = get_settings()
delivery.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="FarmDirect Delivery API",
    description="Delivery quotes, pickup verification and courier dispatch",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the delivery domain context and bind a request id for logging."""
    add_context(request_id=request.headers.get("x-request-id") or uuid4().hex, path=request.url.path)
    try:
        if request.url.path.startswith("/delivery"):
            with delivery.domain_context():
                return await call_next(request)
        # Health check, docs, etc.
        return await call_next(request)
    finally:
        clear_context()


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from delivery.api import delivery_router  # noqa: E402

app.include_router(delivery_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "environment": settings.environment,
            "domains": {"delivery": {"name": delivery.name}},
        }
    )
