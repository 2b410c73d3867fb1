"""Service-level routes (banner, health) and CORS settings."""

import os

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from protean.utils.globals import current_domain

DEFAULT_CORS_ORIGINS = (
    "https://sparrow.nivakaran.dev",
    "http://localhost:3000",
    "http://nivakaran.dev",
)


def cors_origins() -> list[str]:
    """Allowed origins from the comma-separated ``CORS_ORIGINS`` variable."""
    configured = os.getenv("CORS_ORIGINS")
    if not configured:
        return list(DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in configured.split(",") if origin.strip()]


service_router = APIRouter(tags=["service"])


@service_router.get("/")
async def root():
    return JSONResponse(content={"message": "Sparrow: Notification Service"})


@service_router.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "message": "Notification Service is running..",
            "domain": current_domain.name,
        }
    )
