"""
Gestionnaire d'un tour de chat.

Sous le verrou de la session: ajout du message utilisateur, compression
éventuelle, construction du prompt depuis la vue choisie, appel au backend,
ajout de la réponse.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional

from ..core.constants import SUMMARY_MARKER
from ..core.exceptions import SummarizationError
from ..core.models import Session
from ..config.settings import ChatConfig
from ..llm.client import AnthropicClient
from ..features.compression.engine import CompressionOutcome
from .conversation import ConversationService

logger = logging.getLogger(__name__)


def build_system_prompt(has_summaries: bool) -> str:
    summary_hint = (
        f" You have access to a summary of previous conversation history marked with {SUMMARY_MARKER}."
        if has_summaries else ""
    )
    return (
        "You are a helpful AI assistant engaged in a conversation with a user."
        f"{summary_hint} Continue the conversation naturally, referring to previous context when relevant."
    )


@dataclass
class ChatTurnResult:
    """Résultat d'un tour de chat."""
    message: str
    usage: Dict[str, Any] = field(default_factory=dict)
    response_time: int = 0
    compression: Optional[CompressionOutcome] = None
    compression_error: Optional[str] = None
    session_stats: Dict[str, Any] = field(default_factory=dict)

    @property
    def compression_occurred(self) -> bool:
        return bool(self.compression and self.compression.compressed)

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "success": True,
            "message": self.message,
            "usage": self.usage,
            "response_time": self.response_time,
            "compression_occurred": self.compression_occurred,
            "compression_info": (
                self.compression.event.to_dict() if self.compression_occurred else None
            ),
            "session_stats": self.session_stats
        }
        if self.compression_error:
            result["compression_error"] = self.compression_error
        return result


class ChatService:
    """Orchestre un tour de conversation pour une session."""

    def __init__(
        self,
        conversations: ConversationService,
        client: AnthropicClient,
        config: Optional[ChatConfig] = None
    ):
        self.conversations = conversations
        self.client = client
        self.config = config or ChatConfig()

    async def send_message(
        self,
        session_id: str,
        text: str,
        use_compression: Optional[bool] = None
    ) -> ChatTurnResult:
        """
        Traite un message utilisateur.

        Raises:
            SessionNotFoundError: Session inconnue
            ProviderError: Le backend n'a pas pu répondre (le message
                utilisateur reste dans l'historique)
        """
        engine = self.conversations.engine

        async with self.conversations.session_scope(session_id) as session:
            if use_compression is not None:
                session.compression_enabled = use_compression

            session.add_message("user", text)

            compression = None
            compression_error = None
            if session.compression_enabled and engine.should_compress(session):
                logger.info("🗜️ [CHAT] Compression de la session %s...", session_id)
                try:
                    compression = await engine.compress(session)
                except SummarizationError as e:
                    compression_error = e.message

            history = (
                engine.reconstruct_compressed(session)
                if session.compression_enabled
                else engine.reconstruct_full(session)
            )
            prompt_messages = self._build_prompt(history, text)

            response = await self.client.create_message(
                model=self.config.model,
                messages=prompt_messages,
                max_tokens=self.config.max_tokens,
                temperature=self.config.temperature,
                system=build_system_prompt(bool(session.summaries))
            )

            session.add_message("assistant", response.text)

            return ChatTurnResult(
                message=response.text,
                usage=response.usage,
                response_time=response.response_time,
                compression=compression,
                compression_error=compression_error,
                session_stats=self._turn_stats(session, len(history))
            )

    @staticmethod
    def _build_prompt(history: List[Dict[str, str]], text: str) -> List[Dict[str, str]]:
        """Le message en attente doit clore le prompt, même s'il vient d'être résumé."""
        pending = {"role": "user", "content": text}
        if history and history[-1] == pending:
            return list(history)
        return list(history) + [pending]

    @staticmethod
    def _turn_stats(session: Session, history_size: int) -> Dict[str, Any]:
        return {
            "total_messages": session.stats.total_messages,
            "total_compressions": session.stats.total_compressions,
            "tokens_saved": session.stats.tokens_saved,
            "current_history_size": history_size,
            "use_compression": session.compression_enabled
        }
