"""
Constantes globales pour Dialogue Compression.
"""

# ============================================================================
# COMPRESSION
# ============================================================================
DEFAULT_COMPRESSION_CONFIG = {
    "messages_before_compression": 10,  # Compresse tous les 10 messages
    "messages_to_keep": 2,  # Fenêtre de rétention après compression
    "model": "claude-3-haiku-20240307",
    "temperature": 0.3,
    "max_tokens": 4000,
    "enabled_by_default": True,
}

SUMMARY_MARKER = "[CONVERSATION SUMMARY UP TO THIS POINT]"

# Rôles comptés pour le seuil de compression
ELIGIBLE_ROLES = ("user", "assistant")

# Estimation grossière: 1 token ≈ 4 caractères
CHARS_PER_TOKEN = 4

# ============================================================================
# CHAT
# ============================================================================
DEFAULT_CHAT_CONFIG = {
    "model": "claude-3-haiku-20240307",
    "temperature": 0.7,
    "max_tokens": 2000,
}

# ============================================================================
# BACKEND ANTHROPIC
# ============================================================================
DEFAULT_ANTHROPIC_CONFIG = {
    "api_key": "",
    "base_url": "https://api.anthropic.com",
    "api_version": "2023-06-01",
    "timeout": 60.0,
    "max_retries": 2,
    "retry_delay": 1.0,
}

# ============================================================================
# SESSIONS
# ============================================================================
DEFAULT_SESSION_TTL_SECONDS = 60 * 60  # 1 heure d'inactivité
DEFAULT_SWEEP_INTERVAL_SECONDS = 60 * 60

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3007

# Longueur des aperçus de résumé dans les rapports
SUMMARY_PREVIEW_LENGTH = 200
