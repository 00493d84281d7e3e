"""
Health check endpoints.
Used for monitoring, deployment readiness checks, and basic connectivity tests.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from civiclens.core.settings import settings
from civiclens.services.gemini import ModelClient, get_model_client


router = APIRouter(prefix="/health", tags=["Health"])


@router.get("")
async def health_check():
    """
    Basic health check endpoint.
    Returns 200 if service is running.
    """
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@router.get("/ai")
async def ai_health(client: ModelClient = Depends(get_model_client)):
    """
    Reasoning service configuration check.
    Does not call the service; a disabled client means every flow falls back.
    """
    return {
        "status": "healthy" if client.is_enabled() else "degraded",
        "ai_enabled": client.is_enabled(),
        "models": {
            "vision": settings.GEMINI_VISION_MODEL,
            "search": settings.GEMINI_SEARCH_MODEL,
            "chat": settings.GEMINI_CHAT_MODEL,
            "maps": settings.GEMINI_MAPS_MODEL,
        },
        "timestamp": datetime.now(timezone.utc).isoformat()
    }
