"""Tests for process wiring."""
from datetime import timedelta

import pytest

from services.jobs.queue import InMemoryJobQueue
from services.jobs.worker import startup
from services.main import build_engine


def test_build_engine_uses_settings_defaults():
    engine = build_engine(InMemoryJobQueue())

    assert engine.lead_time == timedelta(hours=2)
    assert engine.page_size == 20


@pytest.mark.asyncio
async def test_worker_startup_registers_mail_job(monkeypatch):
    monkeypatch.setattr("services.jobs.worker.setup_logging", lambda: None)
    ctx = {}

    await startup(ctx)

    assert ctx["cancellation_mail"].key == "CancellationMail"
    assert ctx["max_attempts"] == 3
