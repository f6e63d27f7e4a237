"""
Routes API pour le health check.
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health_check(request: Request):
    """Health check: clé API, sessions actives, configuration de compression."""
    settings = request.app.state.settings
    conversations = request.app.state.conversations

    return {
        "status": "ok",
        "has_api_key": settings.anthropic.has_api_key,
        "active_sessions": len(conversations.store),
        "compression_config": settings.compression.to_dict(),
        "timestamp": datetime.now(timezone.utc).isoformat()
    }
