"""
Asynchronous job queue.

Producers only ever call ``enqueue``. Jobs are stored by ARQ in Redis and run
by the worker in ``services.jobs.worker``; a job stays in Redis until a worker
finishes it, so delivery is at-least-once.
"""
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from arq import ArqRedis, create_pool
from arq.connections import RedisSettings

from core.config import settings


def get_redis_settings(redis_url: str | None = None) -> RedisSettings:
    """Get Redis settings for the ARQ pool and worker"""
    return RedisSettings.from_dsn(redis_url or settings.redis_url)


@dataclass(frozen=True)
class QueuedJob:
    """Receipt for an enqueued job."""
    key: str
    payload: Dict[str, Any]
    id: Optional[str] = None


class JobQueue(ABC):
    """Enqueue-side contract used by the scheduling engine."""

    @abstractmethod
    async def enqueue(self, key: str, payload: Dict[str, Any]) -> QueuedJob:
        """Add a job for the handler registered under ``key``."""


class ArqJobQueue(JobQueue):
    """Jobs go to an ARQ queue; ``key`` is the registered function name."""

    def __init__(self, pool: ArqRedis, queue_name: str | None = None):
        self.pool = pool
        self.queue_name = queue_name or settings.job_queue_name

    @classmethod
    async def create(cls, redis_url: str | None = None, queue_name: str | None = None) -> "ArqJobQueue":
        queue_name = queue_name or settings.job_queue_name
        pool = await create_pool(get_redis_settings(redis_url), default_queue_name=queue_name)
        return cls(pool, queue_name)

    async def enqueue(self, key: str, payload: Dict[str, Any]) -> QueuedJob:
        job = await self.pool.enqueue_job(key, payload, _queue_name=self.queue_name)
        return QueuedJob(key=key, payload=payload, id=job.job_id if job is not None else None)

    async def close(self) -> None:
        await self.pool.aclose()


class InMemoryJobQueue(JobQueue):
    """Process-local queue that only records jobs; used in tests."""

    def __init__(self):
        self._pending: List[QueuedJob] = []

    async def enqueue(self, key: str, payload: Dict[str, Any]) -> QueuedJob:
        job = QueuedJob(key=key, payload=payload, id=uuid.uuid4().hex)
        self._pending.append(job)
        return job

    async def size(self) -> int:
        return len(self._pending)

    def pending(self) -> List[QueuedJob]:
        """Snapshot of recorded jobs, oldest first."""
        return list(self._pending)
