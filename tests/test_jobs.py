"""Tests for the job queue, worker task and cancellation mail job."""
from datetime import datetime, timezone

import pytest
from arq import Retry

from core.dto import CancellationJobPayload
from services.jobs.cancellation_mail import CancellationMail, MailMessage
from services.jobs.queue import ArqJobQueue, InMemoryJobQueue
from services.jobs.worker import WorkerSettings, cancellation_mail_task


PAYLOAD = {
    "appointment": {
        "id": 7,
        "customer_id": 1,
        "provider_id": 2,
        "scheduled_at": "2024-06-01T14:00:00Z",
        "canceled_at": "2024-06-01T11:00:00Z",
    },
    "provider": {"name": "Paula Provider", "email": "paula@example.com"},
    "customer": {"name": "Alice Customer"},
}


class FakeArqJob:
    def __init__(self, job_id):
        self.job_id = job_id


class FakeArqPool:
    """Records enqueue_job calls the way ArqRedis receives them."""

    def __init__(self):
        self.calls = []

    async def enqueue_job(self, function, *args, **kwargs):
        self.calls.append((function, args, kwargs))
        return FakeArqJob(f"job-{len(self.calls)}")


def _ctx(deliver, job_try=1):
    return {
        "job_try": job_try,
        "job_id": "job-1",
        "max_attempts": 3,
        "cancellation_mail": CancellationMail(deliver=deliver, timezone_str="UTC"),
    }


@pytest.mark.asyncio
async def test_in_memory_queue_records_jobs_in_order():
    queue = InMemoryJobQueue()
    first = await queue.enqueue("A", {"n": 1})
    await queue.enqueue("B", {"n": 2})

    assert await queue.size() == 2
    assert [j.key for j in queue.pending()] == ["A", "B"]
    assert queue.pending()[0].id == first.id


@pytest.mark.asyncio
async def test_arq_queue_enqueues_by_function_name():
    pool = FakeArqPool()
    queue = ArqJobQueue(pool, queue_name="test:jobs")

    job = await queue.enqueue(CancellationMail.key, PAYLOAD)

    assert job.id == "job-1"
    assert job.key == CancellationMail.key
    assert pool.calls == [(CancellationMail.key, (PAYLOAD,), {"_queue_name": "test:jobs"})]


def test_worker_settings_register_cancellation_mail():
    names = [f.name for f in WorkerSettings.functions]

    assert names == [CancellationMail.key]
    assert WorkerSettings.max_tries == 3
    assert WorkerSettings.queue_name == "slotbook:jobs"


@pytest.mark.asyncio
async def test_task_delivers_mail():
    delivered = []

    async def deliver(message: MailMessage):
        delivered.append(message)

    await cancellation_mail_task(_ctx(deliver), PAYLOAD)

    assert len(delivered) == 1
    assert delivered[0].to == "Paula Provider <paula@example.com>"


@pytest.mark.asyncio
async def test_task_asks_for_retry_while_attempts_remain():
    async def deliver(message):
        raise ConnectionError("smtp timeout")

    with pytest.raises(Retry) as exc_info:
        await cancellation_mail_task(_ctx(deliver, job_try=2), PAYLOAD)

    assert isinstance(exc_info.value.__cause__, ConnectionError)


@pytest.mark.asyncio
async def test_task_fails_on_last_attempt(caplog):
    async def deliver(message):
        raise ConnectionError("smtp timeout")

    with pytest.raises(ConnectionError):
        await cancellation_mail_task(_ctx(deliver, job_try=3), PAYLOAD)

    assert "Job failed after 3 attempts" in caplog.text


def test_cancellation_mail_message():
    job = CancellationMail(deliver=None, timezone_str="America/Sao_Paulo")
    message = job.build_message(CancellationJobPayload.model_validate(PAYLOAD))

    assert message.to == "Paula Provider <paula@example.com>"
    assert message.subject == "Appointment canceled"
    assert "Customer: Alice Customer" in message.text
    # 14:00 UTC is 11:00 in Sao Paulo
    assert "day 01 of June, at 11:00h" in message.text


@pytest.mark.asyncio
async def test_cancellation_mail_delivers():
    delivered = []

    async def deliver(message: MailMessage):
        delivered.append(message)

    await CancellationMail(deliver=deliver, timezone_str="UTC").handle(PAYLOAD)

    assert len(delivered) == 1
    assert "at 14:00h" in delivered[0].text


def test_payload_snapshot_parses_instants():
    payload = CancellationJobPayload.model_validate(PAYLOAD)
    assert payload.appointment.scheduled_at == datetime(2024, 6, 1, 14, tzinfo=timezone.utc)
