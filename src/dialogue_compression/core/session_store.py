"""
Registre en mémoire des sessions de conversation.

Chaque session possède son propre asyncio.Lock: les tours de chat d'une même
session sont sérialisés, les sessions différentes avancent en parallèle.
"""
import asyncio
import logging
import secrets
import time
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Any, Optional, Union

from .exceptions import SessionNotFoundError
from .models import Session, utcnow

logger = logging.getLogger(__name__)


def generate_session_id() -> str:
    """Génère un identifiant du type session_<epoch-ms>_<aléatoire>."""
    return f"session_{int(time.time() * 1000)}_{secrets.token_hex(4)}"


class SessionStore:
    """Map autoritaire id -> Session, avec cycle de vie."""

    def __init__(
        self,
        id_factory: Optional[Callable[[], str]] = None,
        compression_enabled: bool = True
    ):
        self._id_factory = id_factory or generate_session_id
        self._compression_enabled = compression_enabled
        self._sessions: Dict[str, Session] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def create(self) -> str:
        """
        Crée et enregistre une nouvelle session vide.

        Returns:
            Identifiant de la session (unique parmi les sessions vivantes)
        """
        session_id = self._id_factory()
        while session_id in self._sessions:
            session_id = self._id_factory()

        self._sessions[session_id] = Session(
            id=session_id,
            compression_enabled=self._compression_enabled
        )
        self._locks[session_id] = asyncio.Lock()
        logger.info("🆕 [SESSIONS] Session créée: %s", session_id)
        return session_id

    def get(self, session_id: str) -> Session:
        """
        Retourne la session (mutable en place).

        Raises:
            SessionNotFoundError: Si l'id est inconnu
        """
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def lock(self, session_id: str) -> asyncio.Lock:
        """
        Retourne le verrou d'exclusion de la session.

        Raises:
            SessionNotFoundError: Si l'id est inconnu
        """
        lock = self._locks.get(session_id)
        if lock is None:
            raise SessionNotFoundError(session_id)
        return lock

    def delete(self, session_id: str) -> bool:
        """Supprime la session si présente; retourne si elle existait."""
        session = self._sessions.pop(session_id, None)
        self._locks.pop(session_id, None)
        if session is None:
            return False
        logger.info("🗑️ [SESSIONS] Session supprimée: %s", session_id)
        return True

    def list(self) -> List[Dict[str, Any]]:
        """Instantané des statistiques publiques de toutes les sessions."""
        return [session.to_summary_dict() for session in list(self._sessions.values())]

    def sweep(
        self,
        now: Optional[datetime] = None,
        ttl: Union[timedelta, float] = 3600
    ) -> int:
        """
        Évince les sessions inactives depuis plus de `ttl`.

        Les sessions dont le verrou est tenu (requête en cours) sont ignorées
        jusqu'au prochain passage.

        Args:
            now: Instant de référence (défaut: maintenant)
            ttl: Durée d'inactivité maximale (timedelta ou secondes)

        Returns:
            Nombre de sessions supprimées
        """
        now = now or utcnow()
        if not isinstance(ttl, timedelta):
            ttl = timedelta(seconds=ttl)
        cutoff = now - ttl

        expired = [
            session_id
            for session_id, session in list(self._sessions.items())
            if session.last_activity_at < cutoff
        ]

        removed = 0
        for session_id in expired:
            lock = self._locks.get(session_id)
            if lock is not None and lock.locked():
                continue
            session = self._sessions.get(session_id)
            # Supprimée entre-temps, ou réactivée
            if session is None or session.last_activity_at >= cutoff:
                continue
            if self.delete(session_id):
                removed += 1

        if removed:
            logger.info("🧹 [SWEEP] %d session(s) inactive(s) supprimée(s)", removed)
        return removed
