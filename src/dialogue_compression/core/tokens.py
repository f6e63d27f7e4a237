"""
Estimation du nombre de tokens.

Ce n'est pas un comptage exact: ceil(caractères / 4), suffisant pour
comparer les vues complète et compressée d'une même session.
"""
import math
from typing import Dict, List

from .constants import CHARS_PER_TOKEN


def estimate_tokens(text: str) -> int:
    """
    Estime le nombre de tokens d'un texte.

    Args:
        text: Texte à analyser

    Returns:
        Nombre de tokens estimé (0 pour un texte vide)
    """
    if not text:
        return 0
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def join_contents(messages: List[Dict[str, str]]) -> str:
    """Concatène le contenu des messages, séparés par un espace."""
    return " ".join(msg.get("content", "") for msg in messages)


def estimate_messages_tokens(messages: List[Dict[str, str]]) -> int:
    """Estime les tokens d'une liste de messages {role, content}."""
    return estimate_tokens(join_contents(messages))
