"""Background jobs: queue, worker and job handlers."""

from services.jobs.queue import JobQueue, QueuedJob, ArqJobQueue, InMemoryJobQueue
from services.jobs.cancellation_mail import CancellationMail, MailMessage

__all__ = [
    'JobQueue',
    'QueuedJob',
    'ArqJobQueue',
    'InMemoryJobQueue',
    'CancellationMail',
    'MailMessage',
]
