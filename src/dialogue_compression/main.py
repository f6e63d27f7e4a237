"""
Dialogue Compression - Application FastAPI Factory.
Sessions de conversation en mémoire avec compression par résumés LLM.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config.loader import load_settings
from .config.settings import Settings
from .core.session_store import SessionStore
from .llm.client import create_anthropic_client
from .features.compression.engine import CompressionEngine
from .features.compression.summarizer import AnthropicSummarizer, Summarizer
from .services.conversation import ConversationService
from .services.chat import ChatService
from .services.sweeper import create_session_sweeper
from .api.router import api_router

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    summarizer: Optional[Summarizer] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> FastAPI:
    """
    Factory pour créer l'application FastAPI.

    Args:
        settings: Paramètres validés (défaut: chargés depuis config.toml)
        summarizer: Summarizer à utiliser (défaut: AnthropicSummarizer)
        transport: Transport HTTPX pour le client Anthropic (tests)

    Returns:
        Instance configurée de FastAPI
    """
    settings = settings or load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Gestion du cycle de vie de l'application."""
        await _startup(app)
        yield
        await _shutdown(app)

    app = FastAPI(
        title="Dialogue Compression",
        description="Sessions de conversation avec compression automatique de l'historique",
        version="1.0.0",
        lifespan=lifespan
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    client = create_anthropic_client(settings.anthropic, transport=transport)
    engine = CompressionEngine(
        summarizer=summarizer or AnthropicSummarizer.from_config(client, settings.compression),
        config=settings.compression
    )
    store = SessionStore(compression_enabled=settings.compression.enabled_by_default)
    conversations = ConversationService(
        store=store,
        engine=engine,
        session_ttl=settings.sessions.ttl_seconds
    )

    app.state.settings = settings
    app.state.client = client
    app.state.conversations = conversations
    app.state.chat = ChatService(conversations, client, settings.chat)
    app.state.sweeper = create_session_sweeper(
        conversations,
        interval_seconds=settings.sessions.sweep_interval_seconds,
        ttl_seconds=settings.sessions.ttl_seconds
    )

    # Inclusion des routes API
    app.include_router(api_router)

    return app


async def _startup(app: FastAPI):
    """Initialisation au démarrage."""
    settings: Settings = app.state.settings
    compression = settings.compression

    logger.info("🚀 Démarrage de Dialogue Compression...")
    if not settings.anthropic.has_api_key:
        logger.warning("⚠️ ANTHROPIC_API_KEY non configurée: chat et compression indisponibles")
    logger.info(
        "✅ Compression: tous les %d messages, %d conservés, modèle %s (température %.1f)",
        compression.messages_before_compression,
        compression.messages_to_keep,
        compression.model,
        compression.temperature
    )

    await app.state.sweeper.start()


async def _shutdown(app: FastAPI):
    """Arrêt de l'application."""
    logger.info("👋 Arrêt du serveur...")
    await app.state.sweeper.stop()
    await app.state.client.aclose()
    logger.info("✅ Serveur arrêté proprement")
