"""Sparrow notification service: FastAPI application.

Processes commands synchronously via HTTP. Every request runs inside the
notifications domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects Protean's configuration overlay.
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from notifications.domain import notifications
from notifications.utils.logging import add_context, clear_context

notifications.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
from notifications.api.errors import register_exception_handlers  # noqa: E402
from notifications.api.routes import notification_router, preference_router  # noqa: E402
from notifications.api.service import cors_origins, service_router  # noqa: E402

app = FastAPI(
    title="Sparrow Notification Service",
    description="Notification records, delivery preferences and quiet hours",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the notifications domain context for each request."""
    clear_context()
    add_context(method=request.method, path=request.url.path)
    with notifications.domain_context():
        return await call_next(request)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
app.include_router(service_router)
app.include_router(notification_router)
app.include_router(preference_router)
register_exception_handlers(app)
