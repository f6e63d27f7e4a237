"""
Configuration des tests pytest.
"""
import asyncio
import os
import sys
from typing import List, Optional

import pytest

# Ajoute src au path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from dialogue_compression.config.settings import CompressionConfig  # noqa: E402
from dialogue_compression.core.exceptions import SummarizationError  # noqa: E402
from dialogue_compression.core.session_store import SessionStore  # noqa: E402
from dialogue_compression.features.compression.engine import CompressionEngine  # noqa: E402
from dialogue_compression.features.compression.summarizer import SummaryResult  # noqa: E402
from dialogue_compression.services.conversation import ConversationService  # noqa: E402


def pytest_configure(config):
    """Configure pytest pour async."""
    config.addinivalue_line(
        "markers", "asyncio: marque un test comme asynchrone"
    )


class FakeSummarizer:
    """Summarizer en mémoire: enregistre les appels, peut échouer ou ralentir."""

    def __init__(
        self,
        summary: str = "Résumé: l'utilisateur parle de Python.",
        input_tokens: int = 1200,
        output_tokens: int = 150,
        fail: bool = False,
        delay: float = 0.0
    ):
        self.summary = summary
        self.input_tokens = input_tokens
        self.output_tokens = output_tokens
        self.fail = fail
        self.delay = delay
        self.calls: List[tuple] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def summarize(self, transcript_text: str, prompt_template: str) -> SummaryResult:
        self.calls.append((transcript_text, prompt_template))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            if self.fail:
                raise SummarizationError("Résumé indisponible: provider en panne")
            return SummaryResult(
                summary_text=self.summary,
                input_tokens=self.input_tokens,
                output_tokens=self.output_tokens
            )
        finally:
            self.in_flight -= 1


@pytest.fixture
def summarizer_factory():
    """Fabrique de FakeSummarizer paramétrables."""
    return FakeSummarizer


@pytest.fixture
def summarizer():
    return FakeSummarizer()


@pytest.fixture
def failing_summarizer():
    return FakeSummarizer(fail=True)


@pytest.fixture
def compression_config():
    """Configuration par défaut: seuil 10, rétention 2."""
    return CompressionConfig()


@pytest.fixture
def engine(summarizer, compression_config):
    return CompressionEngine(summarizer=summarizer, config=compression_config)


@pytest.fixture
def store():
    return SessionStore()


@pytest.fixture
def conversations(store, engine):
    return ConversationService(store=store, engine=engine, session_ttl=3600)


@pytest.fixture
def add_exchanges():
    """Ajoute N paires user/assistant à une session."""

    def _add(session, count: int, prefix: Optional[str] = None):
        for i in range(count):
            label = f"{prefix} {i + 1}" if prefix else f"{i + 1}"
            session.add_message("user", f"Question {label}")
            session.add_message("assistant", f"Réponse {label}")
        return session

    return _add


@pytest.fixture
def anthropic_payload():
    """Fabrique de réponses JSON de l'API Messages."""

    def _payload(text: str = "Bonjour!", input_tokens: int = 42, output_tokens: int = 7):
        return {
            "id": "msg_test",
            "type": "message",
            "role": "assistant",
            "model": "claude-3-haiku-20240307",
            "content": [{"type": "text", "text": text}],
            "usage": {"input_tokens": input_tokens, "output_tokens": output_tokens}
        }

    return _payload
