from __future__ import annotations

from fastapi import APIRouter, Depends

from app.services.credentials import get_slack_credentials
from server.config import Settings, get_settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(settings: Settings = Depends(get_settings)) -> dict:
    """Return service health status for monitoring and load balancers."""
    credentials = get_slack_credentials()
    return {
        "ok": True,
        "service": "slack-adapter",
        "version": settings.app_version,
        "signing_secret_configured": bool(credentials.signing_secret),
        "access_token_configured": bool(credentials.access_token),
    }


@router.get("/healthz")
async def healthz() -> dict:
    """Alternative health endpoint (kept for compatibility)."""
    return {"status": "ok"}
