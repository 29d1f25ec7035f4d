"""Health check endpoints."""

import platform
from datetime import datetime

from fastapi import APIRouter, Request

from mealmatch.config import get_settings

router = APIRouter()


@router.get("/health")
async def health_check():
    """Basic health check."""
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
    }


@router.get("/health/detailed")
async def detailed_health(request: Request):
    """Which optional integrations are configured."""
    settings = get_settings()
    remote_state = getattr(request.app.state, "remote_state", None)

    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "system": {
            "platform": platform.system(),
            "python": platform.python_version(),
            "environment": settings.environment,
        },
        "integrations": {
            "mealdb": True,
            "spoonacular": settings.spoonacular_enabled,
            "usda": settings.usda_enabled,
            "video": settings.video_enabled,
            "remote_state": remote_state is not None,
        },
    }
