"""
Client du backend de génération de texte.
"""

from .client import AnthropicClient, MessageResponse, create_anthropic_client

__all__ = [
    "AnthropicClient",
    "MessageResponse",
    "create_anthropic_client",
]
