"""
Routes API par domaine.
"""

from . import sessions
from . import chat
from . import health

__all__ = [
    "sessions",
    "chat",
    "health",
]
