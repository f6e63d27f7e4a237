"""Service: éviction périodique des sessions inactives.

Contraintes:
    - Tourne dans une tâche asyncio démarrée par la lifespan de l'app
    - Une erreur pendant un passage ne doit jamais arrêter la boucle
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from .conversation import ConversationService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SweeperConfig:
    """Configuration de l'éviction."""

    enabled: bool = True
    interval_seconds: float = 3600.0
    ttl_seconds: float = 3600.0


class SessionSweeper:
    """Lance `sweep_idle` à intervalle régulier."""

    def __init__(self, conversations: ConversationService, config: SweeperConfig):
        self._conversations = conversations
        self._config = config

        self._running = False
        self._task: Optional[asyncio.Task[None]] = None

    @property
    def config(self) -> SweeperConfig:
        return self._config

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Démarre la boucle d'éviction dans une tâche asyncio."""

        if not self._config.enabled or self._running:
            return

        self._running = True
        self._task = asyncio.create_task(self._sweep_loop())

    async def stop(self) -> None:
        """Arrête la boucle proprement (annule la tâche)."""

        self._running = False
        if not self._task:
            return

        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        finally:
            self._task = None

    def sweep_once(self) -> int:
        """Exécute un passage d'éviction; retourne le nombre de sessions supprimées."""

        return self._conversations.sweep_idle(ttl=self._config.ttl_seconds)

    async def _sweep_loop(self) -> None:
        delay = max(self._config.interval_seconds, 1.0)

        while self._running:
            try:
                await asyncio.sleep(delay)
            except asyncio.CancelledError:
                break

            try:
                self.sweep_once()
            except Exception as e:
                logger.warning("⚠️ [SWEEP] Erreur pendant l'éviction: %s", e)


def create_session_sweeper(
    conversations: ConversationService,
    interval_seconds: float,
    ttl_seconds: float,
) -> SessionSweeper:
    """Factory: crée le service d'éviction."""

    return SessionSweeper(
        conversations=conversations,
        config=SweeperConfig(interval_seconds=interval_seconds, ttl_seconds=ttl_seconds),
    )
