"""
Services métier de Dialogue Compression.
"""

from .conversation import ConversationService, HISTORY_MODES
from .chat import ChatService, ChatTurnResult, build_system_prompt
from .sweeper import SessionSweeper, SweeperConfig, create_session_sweeper

__all__ = [
    "ConversationService",
    "HISTORY_MODES",
    "ChatService",
    "ChatTurnResult",
    "build_system_prompt",
    "SessionSweeper",
    "SweeperConfig",
    "create_session_sweeper",
]
