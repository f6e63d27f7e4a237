"""
Moteur de compression du dialogue.

Stratégie:
1. Quand le nombre de messages user/assistant atteint le seuil, toute
   l'historique courante est résumée par le Summarizer
2. Le résumé et l'événement sont ajoutés, les stats cumulées
3. Seuls les N derniers messages sont conservés (fenêtre de rétention)

La compression est tout-ou-rien: en cas d'échec du résumé, la session
n'est pas modifiée. L'appelant doit tenir le verrou de la session.
"""
import logging
from dataclasses import dataclass
from typing import List, Dict, Any, Optional

from ...core.constants import SUMMARY_MARKER
from ...core.exceptions import SummarizationError
from ...core.models import Session, Summary, CompressionEvent, utcnow
from ...config.settings import CompressionConfig
from .summarizer import Summarizer, SummaryResult, SUMMARY_PROMPT_TEMPLATE

logger = logging.getLogger(__name__)


@dataclass
class CompressionOutcome:
    """Résultat d'une tentative de compression."""
    compressed: bool
    session_id: str
    messages_before: int = 0
    messages_after: int = 0
    summary: Optional[Summary] = None
    event: Optional[CompressionEvent] = None
    reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "compressed": self.compressed,
            "session_id": self.session_id,
            "messages_before": self.messages_before,
            "messages_after": self.messages_after,
        }
        if self.summary:
            result["summary"] = self.summary.content
        if self.event:
            result["compression_event"] = self.event.to_dict()
        if self.reason:
            result["reason"] = self.reason
        return result


def render_transcript(messages) -> str:
    """Formate les messages en "ROLE: contenu", séparés par une ligne vide."""
    return "\n\n".join(f"{msg.role.upper()}: {msg.content}" for msg in messages)


class CompressionEngine:
    """Décide et effectue la compression d'une Session."""

    def __init__(
        self,
        summarizer: Summarizer,
        config: Optional[CompressionConfig] = None,
        prompt_template: str = SUMMARY_PROMPT_TEMPLATE
    ):
        self.summarizer = summarizer
        self.config = config or CompressionConfig()
        self.prompt_template = prompt_template

    def should_compress(self, session: Session) -> bool:
        """Vrai si le nombre de messages éligibles a atteint le seuil."""
        return session.eligible_message_count() >= self.config.messages_before_compression

    async def compress(self, session: Session) -> CompressionOutcome:
        """
        Compresse l'historique de la session.

        Returns:
            Outcome; `compressed=False, reason="empty_history"` si aucun message

        Raises:
            SummarizationError: Si le résumé échoue (session inchangée)
        """
        snapshot = list(session.messages)
        if not snapshot:
            return CompressionOutcome(
                compressed=False,
                session_id=session.id,
                reason="empty_history"
            )

        transcript = render_transcript(snapshot)
        try:
            result: SummaryResult = await self.summarizer.summarize(transcript, self.prompt_template)
        except SummarizationError as e:
            logger.warning("⚠️ [COMPRESSION] Échec pour la session %s: %s", session.id, e)
            if e.details.get("session_id"):
                raise
            raise SummarizationError(e.message, session_id=session.id) from e
        except Exception as e:
            logger.warning("⚠️ [COMPRESSION] Échec pour la session %s: %s", session.id, e)
            raise SummarizationError(f"Résumé indisponible: {e}", session_id=session.id) from e

        # Commit: aucune suspension à partir d'ici
        now = utcnow().isoformat()
        summary = Summary(
            content=result.summary_text,
            original_message_count=len(snapshot),
            compressed_at=now,
            tokens_in_original=result.input_tokens,
            tokens_in_summary=result.output_tokens
        )

        keep = self.config.messages_to_keep
        retained = snapshot[max(len(snapshot) - keep, 0):]

        event = CompressionEvent(
            timestamp=now,
            message_index=len(snapshot),
            messages_compressed=len(snapshot),
            messages_retained=len(retained),
            summary_length=len(result.summary_text),
            tokens_before=summary.tokens_in_original,
            tokens_after=summary.tokens_in_summary,
            tokens_saved=summary.tokens_in_original - summary.tokens_in_summary
        )

        session.summaries.append(summary)
        session.compression_events.append(event)
        session.stats.record_compression(event)
        session.messages = retained + session.messages[len(snapshot):]

        logger.info(
            "🗜️ [COMPRESSION] Session %s: %d messages résumés, %d → %d tokens (%d économisés)",
            session.id, len(snapshot), event.tokens_before, event.tokens_after, event.tokens_saved
        )

        return CompressionOutcome(
            compressed=True,
            session_id=session.id,
            messages_before=len(snapshot),
            messages_after=len(session.messages),
            summary=summary,
            event=event
        )

    def reconstruct_full(self, session: Session) -> List[Dict[str, str]]:
        """Tous les messages courants, rôle et contenu uniquement."""
        return [{"role": msg.role, "content": msg.content} for msg in session.messages]

    def reconstruct_compressed(self, session: Session) -> List[Dict[str, str]]:
        """
        Résumés (en messages "user" préfixés du marqueur) puis messages
        ajoutés depuis la dernière compression.
        """
        history = [
            {"role": "user", "content": f"{SUMMARY_MARKER}\n{summary.content}"}
            for summary in session.summaries
        ]

        last_event = session.last_compression_event()
        start = last_event.messages_retained if last_event else 0
        history.extend(
            {"role": msg.role, "content": msg.content}
            for msg in session.messages[start:]
        )
        return history
