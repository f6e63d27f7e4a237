"""
Tests unitaires pour les dataclasses métier.
"""
from datetime import datetime, timezone

import pytest

from dialogue_compression.core.models import (
    Session,
    SessionStats,
    CompressionEvent,
)


class TestSession:
    """Tests de l'entité Session."""

    def test_new_session_is_zeroed(self):
        session = Session(id="s1")

        assert session.messages == []
        assert session.summaries == []
        assert session.compression_events == []
        assert session.stats.to_dict() == SessionStats().to_dict()
        assert session.compression_enabled is True

    def test_add_message_updates_stats_and_activity(self):
        session = Session(id="s1")
        now = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

        message = session.add_message("user", "Bonjour", now=now)

        assert message.role == "user"
        assert message.timestamp == now.isoformat()
        assert session.stats.total_messages == 1
        assert session.last_activity_at == now

    def test_add_message_rejects_unknown_role(self):
        session = Session(id="s1")

        with pytest.raises(ValueError):
            session.add_message("system", "Tu es un assistant")

        assert session.stats.total_messages == 0

    def test_add_message_rejects_non_text_content(self):
        session = Session(id="s1")

        with pytest.raises(ValueError):
            session.add_message("user", 12345)
        with pytest.raises(ValueError):
            session.add_message("assistant", ["liste"])

        assert session.messages == []
        assert session.stats.total_messages == 0

    def test_eligible_message_count(self):
        session = Session(id="s1")
        session.add_message("user", "Q")
        session.add_message("assistant", "R")

        assert session.eligible_message_count() == 2

    def test_summary_dict_has_no_message_content(self):
        session = Session(id="s1")
        session.add_message("user", "contenu secret")

        data = session.to_summary_dict()

        assert data["session_id"] == "s1"
        assert data["message_count"] == 1
        assert "contenu secret" not in str(data)


class TestSessionStats:
    """Tests des agrégats cumulés."""

    def test_record_compression_accumulates(self):
        stats = SessionStats()
        event = CompressionEvent(
            timestamp="t",
            message_index=10,
            messages_compressed=10,
            messages_retained=2,
            summary_length=100,
            tokens_before=1000,
            tokens_after=200,
            tokens_saved=800
        )

        stats.record_compression(event)
        stats.record_compression(event)

        assert stats.total_compressions == 2
        assert stats.tokens_before_compression == 2000
        assert stats.tokens_after_compression == 400
        assert stats.tokens_saved == 1600

    def test_negative_savings_are_not_clamped(self):
        stats = SessionStats()
        event = CompressionEvent(
            timestamp="t",
            message_index=2,
            messages_compressed=2,
            messages_retained=2,
            summary_length=5000,
            tokens_before=100,
            tokens_after=300,
            tokens_saved=-200
        )

        stats.record_compression(event)

        assert stats.tokens_saved == -200
