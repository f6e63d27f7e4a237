"""
Tests unitaires pour le moteur de compression.
"""
import pytest

from dialogue_compression.config.settings import CompressionConfig
from dialogue_compression.core.constants import SUMMARY_MARKER
from dialogue_compression.core.exceptions import SummarizationError
from dialogue_compression.core.models import Session
from dialogue_compression.features.compression.engine import (
    CompressionEngine,
    render_transcript,
)
from dialogue_compression.features.compression.summarizer import SUMMARY_PROMPT_TEMPLATE


class TestShouldCompress:
    """Décision de compression (prédicat pur)."""

    def test_below_threshold(self, engine, add_exchanges):
        session = add_exchanges(Session(id="s"), 4)
        session.add_message("user", "Question 5")

        assert engine.should_compress(session) is False

    def test_threshold_reached(self, engine, add_exchanges):
        session = add_exchanges(Session(id="s"), 5)

        assert engine.should_compress(session) is True

    def test_custom_threshold(self, summarizer, add_exchanges):
        engine = CompressionEngine(
            summarizer, CompressionConfig(messages_before_compression=4)
        )
        session = add_exchanges(Session(id="s"), 2)

        assert engine.should_compress(session) is True


class TestCompress:
    """Compression effective d'une session."""

    def test_render_transcript(self):
        session = Session(id="s")
        session.add_message("user", "Bonjour")
        session.add_message("assistant", "Salut")

        assert render_transcript(session.messages) == "USER: Bonjour\n\nASSISTANT: Salut"

    @pytest.mark.asyncio
    async def test_five_pairs_scenario(self, engine, summarizer, add_exchanges):
        """5 paires → compression → 2 messages, 1 résumé, 1 événement."""
        session = add_exchanges(Session(id="s"), 5)
        assert engine.should_compress(session) is True

        outcome = await engine.compress(session)

        assert outcome.compressed is True
        assert len(session.messages) == 2
        assert len(session.summaries) == 1
        assert len(session.compression_events) == 1
        assert session.stats.total_compressions == 1
        assert session.stats.total_messages == 10
        assert [m.content for m in session.messages] == ["Question 5", "Réponse 5"]

        transcript, template = summarizer.calls[0]
        assert template == SUMMARY_PROMPT_TEMPLATE
        assert transcript.startswith("USER: Question 1\n\nASSISTANT: Réponse 1")

    @pytest.mark.asyncio
    async def test_summary_and_event_fields(self, engine, add_exchanges):
        session = add_exchanges(Session(id="s"), 5)

        outcome = await engine.compress(session)

        summary = session.summaries[0]
        assert summary.content == "Résumé: l'utilisateur parle de Python."
        assert summary.original_message_count == 10
        assert summary.tokens_in_original == 1200
        assert summary.tokens_in_summary == 150

        event = session.compression_events[0]
        assert event.message_index == 10
        assert event.messages_compressed == 10
        assert event.messages_retained == 2
        assert event.tokens_saved == 1050
        assert outcome.event is event
        assert outcome.messages_before == 10
        assert outcome.messages_after == 2

        assert session.stats.tokens_before_compression == 1200
        assert session.stats.tokens_after_compression == 150
        assert session.stats.tokens_saved == 1050

    @pytest.mark.asyncio
    async def test_negative_savings_kept(self, summarizer_factory, add_exchanges):
        engine = CompressionEngine(summarizer_factory(input_tokens=100, output_tokens=250))
        session = add_exchanges(Session(id="s"), 5)

        await engine.compress(session)

        assert session.compression_events[0].tokens_saved == -150
        assert session.stats.tokens_saved == -150

    @pytest.mark.asyncio
    async def test_fewer_messages_than_window(self, engine):
        session = Session(id="s")
        session.add_message("user", "Seul message")

        outcome = await engine.compress(session)

        assert outcome.compressed is True
        assert len(session.messages) == 1
        assert session.compression_events[0].messages_retained == 1

    @pytest.mark.asyncio
    async def test_zero_retention_window(self, summarizer, add_exchanges):
        engine = CompressionEngine(summarizer, CompressionConfig(messages_to_keep=0))
        session = add_exchanges(Session(id="s"), 5)

        await engine.compress(session)

        assert session.messages == []

    @pytest.mark.asyncio
    async def test_empty_history_is_noop(self, engine, summarizer):
        session = Session(id="s")

        outcome = await engine.compress(session)

        assert outcome.compressed is False
        assert outcome.reason == "empty_history"
        assert session.summaries == []
        assert summarizer.calls == []

    @pytest.mark.asyncio
    async def test_failure_leaves_session_untouched(self, failing_summarizer, add_exchanges):
        engine = CompressionEngine(failing_summarizer)
        session = add_exchanges(Session(id="s"), 5)
        before = engine.reconstruct_full(session)
        stats_before = session.stats.to_dict()

        with pytest.raises(SummarizationError) as exc:
            await engine.compress(session)

        assert engine.reconstruct_full(session) == before
        assert session.stats.to_dict() == stats_before
        assert session.summaries == []
        assert session.compression_events == []
        assert exc.value.details == {"session_id": "s"}

    @pytest.mark.asyncio
    async def test_unexpected_summarizer_error_is_wrapped(self, add_exchanges):
        class BrokenSummarizer:
            async def summarize(self, transcript_text, prompt_template):
                raise RuntimeError("connexion perdue")

        engine = CompressionEngine(BrokenSummarizer())
        session = add_exchanges(Session(id="s"), 5)

        with pytest.raises(SummarizationError) as exc:
            await engine.compress(session)

        assert "connexion perdue" in exc.value.message
        assert exc.value.details["session_id"] == "s"
        assert len(session.messages) == 10

    @pytest.mark.asyncio
    async def test_threshold_cycle(self, engine, add_exchanges):
        """Après compression: faux, puis vrai après (seuil - 2) messages."""
        session = add_exchanges(Session(id="s"), 5)
        await engine.compress(session)
        assert engine.should_compress(session) is False

        add_exchanges(session, 3, prefix="suite")
        session.add_message("user", "Presque")
        assert engine.should_compress(session) is False

        session.add_message("assistant", "Seuil")
        assert engine.should_compress(session) is True
        assert session.stats.total_messages == 18


class TestReconstruct:
    """Vues complète et compressée."""

    def test_views_without_compression_are_equal(self, engine, add_exchanges):
        session = add_exchanges(Session(id="s"), 2)

        full = engine.reconstruct_full(session)

        assert full == engine.reconstruct_compressed(session)
        assert full[0] == {"role": "user", "content": "Question 1"}
        assert "timestamp" not in full[0]

    def test_full_view_is_idempotent(self, engine, add_exchanges):
        session = add_exchanges(Session(id="s"), 3)

        assert engine.reconstruct_full(session) == engine.reconstruct_full(session)

    @pytest.mark.asyncio
    async def test_compressed_view_after_compression(self, engine, add_exchanges):
        session = add_exchanges(Session(id="s"), 5)
        await engine.compress(session)
        session.add_message("user", "Nouvelle question")

        compressed = engine.reconstruct_compressed(session)
        full = engine.reconstruct_full(session)

        assert compressed[0]["role"] == "user"
        assert compressed[0]["content"].startswith(f"{SUMMARY_MARKER}\n")
        assert compressed[1:] == [{"role": "user", "content": "Nouvelle question"}]
        assert len(compressed) <= len(full)

    @pytest.mark.asyncio
    async def test_summaries_are_emitted_in_order(self, summarizer, add_exchanges):
        engine = CompressionEngine(summarizer)
        session = add_exchanges(Session(id="s"), 5)
        await engine.compress(session)
        summarizer.summary = "Deuxième résumé"
        add_exchanges(session, 4, prefix="b")
        await engine.compress(session)

        compressed = engine.reconstruct_compressed(session)

        assert len(session.summaries) == 2
        assert compressed[0]["content"].endswith("l'utilisateur parle de Python.")
        assert compressed[1]["content"].endswith("Deuxième résumé")
        assert len(compressed) == 2

    @pytest.mark.asyncio
    async def test_compressed_view_grows_with_each_summary(self, summarizer, add_exchanges):
        """
        Taille compressée = résumés + messages depuis la dernière compression.
        Elle ne reste inférieure à la vue complète que tant que le nombre de
        résumés ne dépasse pas la fenêtre de rétention.
        """
        engine = CompressionEngine(summarizer)
        session = add_exchanges(Session(id="s"), 5)
        await engine.compress(session)

        sizes = []
        for _ in range(2):
            add_exchanges(session, 4, prefix="suite")
            await engine.compress(session)
            sizes.append(
                (len(engine.reconstruct_compressed(session)), len(engine.reconstruct_full(session)))
            )

        assert sizes == [(2, 2), (3, 2)]
        retained = session.last_compression_event().messages_retained
        assert len(session.summaries) > retained

        session.add_message("user", "Encore une question")
        compressed = engine.reconstruct_compressed(session)
        assert len(compressed) == len(session.summaries) + len(session.messages) - retained
        assert compressed[-1] == {"role": "user", "content": "Encore une question"}
