"""
Process wiring: builds the scheduling engine and runs the job worker.

    python -m services.main
"""
import asyncio
import logging

from arq.worker import create_worker

from database.base import async_session_maker
from services.jobs.queue import ArqJobQueue, JobQueue
from services.jobs.worker import WorkerSettings
from services.notifications import NotificationDispatcher
from services.scheduling import SchedulingEngine

logger = logging.getLogger(__name__)


def build_engine(job_queue: JobQueue) -> SchedulingEngine:
    """Construct the process-wide engine with its collaborators."""
    return SchedulingEngine(
        session_factory=async_session_maker,
        job_queue=job_queue,
        notifications=NotificationDispatcher(),
    )


async def create_engine() -> SchedulingEngine:
    """Engine backed by the ARQ queue; callers close ``engine.job_queue`` on shutdown."""
    return build_engine(await ArqJobQueue.create())


async def run_worker():
    worker = create_worker(WorkerSettings)
    try:
        await worker.async_run()
    finally:
        await worker.close()


if __name__ == "__main__":
    asyncio.run(run_worker())
