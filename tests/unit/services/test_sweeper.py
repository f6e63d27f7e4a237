"""
Tests unitaires pour le service d'éviction périodique.
"""
from datetime import timedelta

import pytest

from dialogue_compression.core.models import utcnow
from dialogue_compression.services.sweeper import (
    SessionSweeper,
    SweeperConfig,
    create_session_sweeper,
)


def test_factory(conversations):
    sweeper = create_session_sweeper(conversations, interval_seconds=30, ttl_seconds=60)

    assert sweeper.config.interval_seconds == 30
    assert sweeper.config.ttl_seconds == 60


def test_sweep_once_uses_configured_ttl(conversations):
    idle = conversations.create_session()
    conversations.store.get(idle).last_activity_at = utcnow() - timedelta(seconds=120)
    sweeper = create_session_sweeper(conversations, interval_seconds=3600, ttl_seconds=60)

    assert sweeper.sweep_once() == 1
    assert conversations.list_sessions() == []


@pytest.mark.asyncio
async def test_start_and_stop(conversations):
    sweeper = create_session_sweeper(conversations, interval_seconds=3600, ttl_seconds=60)

    await sweeper.start()
    assert sweeper.running is True

    await sweeper.stop()
    assert sweeper.running is False


@pytest.mark.asyncio
async def test_disabled_sweeper_does_not_start(conversations):
    sweeper = SessionSweeper(conversations, SweeperConfig(enabled=False))

    await sweeper.start()

    assert sweeper.running is False
    await sweeper.stop()
