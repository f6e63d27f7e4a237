"""
Résumé LLM pour la compression.

Le moteur ne connaît que l'interface `Summarizer`; l'implémentation par
défaut appelle l'API Messages via AnthropicClient.
"""
import logging
from dataclasses import dataclass
from typing import Protocol

from ...core.exceptions import ProviderError, SummarizationError
from ...config.settings import CompressionConfig
from ...llm.client import AnthropicClient

logger = logging.getLogger(__name__)

SUMMARY_PROMPT_TEMPLATE = """Please create a concise but comprehensive summary of the following conversation. Include all key information, decisions, context, and important details that would be needed to continue the conversation naturally. Format the summary in a clear, structured way.

CONVERSATION:
{conversation}

Provide a summary that captures:
1. Main topics discussed
2. Key information exchanged
3. Any decisions or conclusions
4. Important context for future messages
5. User preferences or requirements mentioned"""


@dataclass
class SummaryResult:
    """Résumé et usage déclaré par le backend."""
    summary_text: str
    input_tokens: int = 0
    output_tokens: int = 0


class Summarizer(Protocol):
    """Collaborateur de résumé utilisé par le moteur de compression."""

    async def summarize(self, transcript_text: str, prompt_template: str) -> SummaryResult:
        """
        Résume une transcription.

        Raises:
            SummarizationError: Pour tout échec (réseau, auth, rejet)
        """
        ...


def build_summary_prompt(transcript_text: str, prompt_template: str = SUMMARY_PROMPT_TEMPLATE) -> str:
    """Insère la transcription dans le template d'instructions."""
    return prompt_template.format(conversation=transcript_text)


class AnthropicSummarizer:
    """Summarizer adossé à l'API Messages d'Anthropic."""

    def __init__(
        self,
        client: AnthropicClient,
        model: str,
        temperature: float = 0.3,
        max_tokens: int = 4000
    ):
        self.client = client
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    @classmethod
    def from_config(cls, client: AnthropicClient, config: CompressionConfig) -> "AnthropicSummarizer":
        return cls(
            client=client,
            model=config.model,
            temperature=config.temperature,
            max_tokens=config.max_tokens
        )

    async def summarize(self, transcript_text: str, prompt_template: str) -> SummaryResult:
        prompt = build_summary_prompt(transcript_text, prompt_template)

        try:
            response = await self.client.create_message(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=self.max_tokens,
                temperature=self.temperature
            )
        except ProviderError as e:
            raise SummarizationError(f"Résumé indisponible: {e.message}") from e

        summary = response.text.strip()
        if not summary:
            raise SummarizationError("Résumé vide renvoyé par le provider")

        logger.info("✅ [COMPRESSION] Résumé généré: %d caractères", len(summary))
        return SummaryResult(
            summary_text=summary,
            input_tokens=response.input_tokens,
            output_tokens=response.output_tokens
        )
