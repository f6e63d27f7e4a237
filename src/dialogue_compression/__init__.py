"""
Dialogue Compression - sessions de conversation avec compression de l'historique.
"""

__version__ = "1.0.0"
