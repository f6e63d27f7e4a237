"""
Façade des opérations de conversation exposées au gestionnaire de requêtes.

Les opérations qui modifient une session s'exécutent sous son verrou;
les projections (vues, stats, comparaison) sont pures.
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timedelta
from typing import AsyncIterator, Dict, Any, List, Optional, Union

from ..core.models import Session
from ..core.session_store import SessionStore
from ..features.compression.engine import CompressionEngine, CompressionOutcome
from ..features.compression.comparison import ComparisonReport, compare_views

logger = logging.getLogger(__name__)

HISTORY_MODES = ("full", "compressed")


class ConversationService:
    """Point d'entrée unique sur le SessionStore et le moteur de compression."""

    def __init__(
        self,
        store: SessionStore,
        engine: CompressionEngine,
        session_ttl: Union[timedelta, float] = 3600
    ):
        self.store = store
        self.engine = engine
        self.session_ttl = session_ttl

    @asynccontextmanager
    async def session_scope(self, session_id: str) -> AsyncIterator[Session]:
        """
        Acquiert le verrou de la session et la fournit.

        Raises:
            SessionNotFoundError: Si la session est inconnue ou a été supprimée
                pendant l'attente du verrou
        """
        lock = self.store.lock(session_id)
        async with lock:
            yield self.store.get(session_id)

    # ------------------------------------------------------------------
    # Cycle de vie
    # ------------------------------------------------------------------

    def create_session(self) -> str:
        return self.store.create()

    def delete_session(self, session_id: str) -> bool:
        return self.store.delete(session_id)

    def list_sessions(self) -> List[Dict[str, Any]]:
        return self.store.list()

    def sweep_idle(
        self,
        ttl: Union[timedelta, float, None] = None,
        now: Optional[datetime] = None
    ) -> int:
        """Évince les sessions inactives (TTL par défaut: configuration)."""
        return self.store.sweep(now=now, ttl=self.session_ttl if ttl is None else ttl)

    # ------------------------------------------------------------------
    # Écritures
    # ------------------------------------------------------------------

    async def append_user_message(self, session_id: str, text: str):
        async with self.session_scope(session_id) as session:
            session.add_message("user", text)

    async def append_assistant_message(self, session_id: str, text: str):
        async with self.session_scope(session_id) as session:
            session.add_message("assistant", text)

    async def compress(self, session_id: str) -> CompressionOutcome:
        """
        Compresse la session sous son verrou.

        Raises:
            SessionNotFoundError: Session inconnue
            SummarizationError: Résumé indisponible (session inchangée)
        """
        async with self.session_scope(session_id) as session:
            return await self.engine.compress(session)

    def set_compression(self, session_id: str, enabled: bool) -> bool:
        session = self.store.get(session_id)
        session.compression_enabled = enabled
        return session.compression_enabled

    def toggle_compression(self, session_id: str) -> bool:
        session = self.store.get(session_id)
        return self.set_compression(session_id, not session.compression_enabled)

    # ------------------------------------------------------------------
    # Lectures
    # ------------------------------------------------------------------

    def should_compress(self, session_id: str) -> bool:
        return self.engine.should_compress(self.store.get(session_id))

    def history_view(self, session_id: str, mode: str = "full") -> List[Dict[str, str]]:
        """
        Reconstruit l'historique.

        Args:
            session_id: ID de la session
            mode: "full" ou "compressed"
        """
        if mode not in HISTORY_MODES:
            raise ValueError(f"Mode d'historique inconnu: {mode}")
        session = self.store.get(session_id)
        if mode == "compressed":
            return self.engine.reconstruct_compressed(session)
        return self.engine.reconstruct_full(session)

    def stats(self, session_id: str) -> Dict[str, Any]:
        return self.store.get(session_id).stats.to_dict()

    def describe(self, session_id: str) -> Dict[str, Any]:
        return self.store.get(session_id).to_dict()

    def compare_views(self, session_id: str) -> ComparisonReport:
        session = self.store.get(session_id)
        return compare_views(
            self.engine.reconstruct_full(session),
            self.engine.reconstruct_compressed(session)
        )
