"""
Router principal de l'API.
"""
from fastapi import APIRouter

from .routes import sessions, chat, health

# Router principal
api_router = APIRouter()

# Inclusion des sous-routers
api_router.include_router(sessions.router, prefix="/api", tags=["sessions"])
api_router.include_router(chat.router, prefix="/api", tags=["chat"])
api_router.include_router(health.router, prefix="/api", tags=["health"])
