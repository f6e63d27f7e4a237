"""
Cœur métier de Dialogue Compression.
Modules indépendants sans dépendances externes au package.
"""

from .exceptions import (
    DialogueCompressionError,
    ConfigurationError,
    SessionNotFoundError,
    ProviderError,
    SummarizationError,
)
from .constants import (
    DEFAULT_COMPRESSION_CONFIG,
    SUMMARY_MARKER,
    ELIGIBLE_ROLES,
)
from .tokens import estimate_tokens, estimate_messages_tokens
from .models import (
    Message,
    Summary,
    CompressionEvent,
    SessionStats,
    Session,
)
from .session_store import SessionStore, generate_session_id

__all__ = [
    # Exceptions
    "DialogueCompressionError",
    "ConfigurationError",
    "SessionNotFoundError",
    "ProviderError",
    "SummarizationError",
    # Constants
    "DEFAULT_COMPRESSION_CONFIG",
    "SUMMARY_MARKER",
    "ELIGIBLE_ROLES",
    # Tokens
    "estimate_tokens",
    "estimate_messages_tokens",
    # Models
    "Message",
    "Summary",
    "CompressionEvent",
    "SessionStats",
    "Session",
    # Store
    "SessionStore",
    "generate_session_id",
]
