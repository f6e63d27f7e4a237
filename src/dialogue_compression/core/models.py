"""
Dataclasses métier pour Dialogue Compression.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Dict, Any

from .constants import ELIGIBLE_ROLES


def utcnow() -> datetime:
    """Horodatage courant (UTC, timezone-aware)."""
    return datetime.now(timezone.utc)


@dataclass
class Message:
    """Message brut de la conversation."""
    role: str  # "user" ou "assistant"
    content: str
    timestamp: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "role": self.role,
            "content": self.content,
            "timestamp": self.timestamp
        }


@dataclass
class Summary:
    """Résumé produit lors d'une compression. Jamais modifié après ajout."""
    content: str
    original_message_count: int
    compressed_at: str
    tokens_in_original: int = 0
    tokens_in_summary: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "content": self.content,
            "original_message_count": self.original_message_count,
            "compressed_at": self.compressed_at,
            "tokens_in_original": self.tokens_in_original,
            "tokens_in_summary": self.tokens_in_summary
        }


@dataclass
class CompressionEvent:
    """Entrée du journal de compression (une par compression réussie)."""
    timestamp: str
    message_index: int
    messages_compressed: int
    messages_retained: int
    summary_length: int
    tokens_before: int
    tokens_after: int
    tokens_saved: int  # Peut être négatif si le résumé est plus long

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "message_index": self.message_index,
            "messages_compressed": self.messages_compressed,
            "messages_retained": self.messages_retained,
            "summary_length": self.summary_length,
            "tokens_before": self.tokens_before,
            "tokens_after": self.tokens_after,
            "tokens_saved": self.tokens_saved
        }


@dataclass
class SessionStats:
    """
    Agrégats cumulés d'une session.

    Mis à jour de façon incrémentale, jamais recalculés depuis l'historique
    (qui est tronqué par la compression).
    """
    total_messages: int = 0
    total_compressions: int = 0
    tokens_before_compression: int = 0
    tokens_after_compression: int = 0
    tokens_saved: int = 0

    def record_compression(self, event: CompressionEvent):
        """Ajoute les compteurs d'un événement de compression."""
        self.total_compressions += 1
        self.tokens_before_compression += event.tokens_before
        self.tokens_after_compression += event.tokens_after
        self.tokens_saved += event.tokens_saved

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_messages": self.total_messages,
            "total_compressions": self.total_compressions,
            "tokens_before_compression": self.tokens_before_compression,
            "tokens_after_compression": self.tokens_after_compression,
            "tokens_saved": self.tokens_saved
        }


@dataclass
class Session:
    """Conversation en cours, propriété exclusive du SessionStore."""
    id: str
    messages: List[Message] = field(default_factory=list)
    summaries: List[Summary] = field(default_factory=list)
    compression_events: List[CompressionEvent] = field(default_factory=list)
    stats: SessionStats = field(default_factory=SessionStats)
    compression_enabled: bool = True
    created_at: datetime = field(default_factory=utcnow)
    last_activity_at: datetime = field(default_factory=utcnow)

    def add_message(self, role: str, content: str, now: Optional[datetime] = None) -> Message:
        """
        Ajoute un message à l'historique.

        Args:
            role: "user" ou "assistant"
            content: Texte du message
            now: Horodatage (défaut: maintenant)

        Returns:
            Le message ajouté
        """
        if role not in ELIGIBLE_ROLES:
            raise ValueError(f"Rôle invalide: {role}")
        if not isinstance(content, str):
            raise ValueError(f"Contenu de message invalide: {type(content).__name__}")

        now = now or utcnow()
        message = Message(role=role, content=content, timestamp=now.isoformat())
        self.messages.append(message)
        self.stats.total_messages += 1
        self.last_activity_at = now
        return message

    def eligible_message_count(self) -> int:
        """Nombre de messages user/assistant dans l'historique courant."""
        return sum(1 for msg in self.messages if msg.role in ELIGIBLE_ROLES)

    def last_compression_event(self) -> Optional[CompressionEvent]:
        return self.compression_events[-1] if self.compression_events else None

    def to_summary_dict(self) -> Dict[str, Any]:
        """Vue publique pour le listing (sans contenu de messages)."""
        return {
            "session_id": self.id,
            "message_count": len(self.messages),
            "summary_count": len(self.summaries),
            "total_messages": self.stats.total_messages,
            "total_compressions": self.stats.total_compressions,
            "tokens_saved": self.stats.tokens_saved,
            "use_compression": self.compression_enabled,
            "created_at": self.created_at.isoformat(),
            "last_activity": self.last_activity_at.isoformat()
        }

    def to_dict(self) -> Dict[str, Any]:
        """Détail de la session (stats et journal de compression)."""
        return {
            "session_id": self.id,
            "message_count": len(self.messages),
            "summary_count": len(self.summaries),
            "stats": self.stats.to_dict(),
            "compression_events": [event.to_dict() for event in self.compression_events],
            "use_compression": self.compression_enabled,
            "created_at": self.created_at.isoformat(),
            "last_activity": self.last_activity_at.isoformat()
        }
