"""
Fonctionnalités de Dialogue Compression.
"""

from .compression import (
    CompressionEngine,
    CompressionOutcome,
    AnthropicSummarizer,
    compare_views,
)

__all__ = [
    "CompressionEngine",
    "CompressionOutcome",
    "AnthropicSummarizer",
    "compare_views",
]
