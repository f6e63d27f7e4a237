"""
Comparaison vue complète / vue compressée d'une session.
"""
from dataclasses import dataclass
from typing import Dict, Any, List

from ...core.tokens import estimate_tokens, join_contents


@dataclass
class ViewMetrics:
    """Mesures d'une vue d'historique."""
    message_count: int
    character_count: int
    estimated_tokens: int

    @classmethod
    def from_history(cls, history: List[Dict[str, str]]) -> "ViewMetrics":
        text = join_contents(history)
        return cls(
            message_count=len(history),
            character_count=len(text),
            estimated_tokens=estimate_tokens(text)
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message_count": self.message_count,
            "character_count": self.character_count,
            "estimated_tokens": self.estimated_tokens
        }


@dataclass
class ComparisonReport:
    """Rapport côte à côte, sans effet de bord sur la session."""
    full: ViewMetrics
    compressed: ViewMetrics

    @property
    def message_reduction(self) -> int:
        return self.full.message_count - self.compressed.message_count

    @property
    def character_reduction(self) -> int:
        return self.full.character_count - self.compressed.character_count

    @property
    def estimated_token_reduction(self) -> int:
        return self.full.estimated_tokens - self.compressed.estimated_tokens

    @property
    def percentage_saved(self) -> float:
        # Historique vide: pas de division par zéro
        if self.full.estimated_tokens == 0:
            return 0.0
        return round(self.estimated_token_reduction / self.full.estimated_tokens * 100, 2)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "full": self.full.to_dict(),
            "compressed": self.compressed.to_dict(),
            "savings": {
                "message_reduction": self.message_reduction,
                "character_reduction": self.character_reduction,
                "estimated_token_reduction": self.estimated_token_reduction,
                "percentage_saved": self.percentage_saved
            }
        }


def compare_views(
    full_history: List[Dict[str, str]],
    compressed_history: List[Dict[str, str]]
) -> ComparisonReport:
    """
    Construit le rapport de comparaison.

    Args:
        full_history: Vue complète {role, content}
        compressed_history: Vue compressée {role, content}

    Returns:
        ComparisonReport
    """
    return ComparisonReport(
        full=ViewMetrics.from_history(full_history),
        compressed=ViewMetrics.from_history(compressed_history)
    )
