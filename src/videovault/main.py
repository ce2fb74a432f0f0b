# src/videovault/main.py
"""Main entry point for the VideoVault application."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from videovault.api.v1 import (
    auth_requests_router,
    auth_router,
    notifications_router,
    users_router,
    videos_router,
    vip_router,
    webauthn_router,
)
from videovault.core.settings import settings

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="VideoVault API",
    description="Passkey-backed VIP verification of uploaded videos",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(auth_router, prefix="/api/v1")
app.include_router(webauthn_router, prefix="/api/v1")
app.include_router(vip_router, prefix="/api/v1")
app.include_router(videos_router, prefix="/api/v1")
app.include_router(users_router, prefix="/api/v1")
app.include_router(auth_requests_router, prefix="/api/v1")
app.include_router(notifications_router, prefix="/api/v1")


@app.on_event("startup")
async def on_startup() -> None:
    if settings.rp_id or settings.rp_origin:
        logger.info(
            "Relying party pinned to id=%s origin=%s",
            settings.rp_id,
            settings.rp_origin,
        )
    else:
        logger.info("Relying party derived per request from Host headers")


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "description": "Passkey-backed VIP verification of uploaded videos",
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("videovault.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
