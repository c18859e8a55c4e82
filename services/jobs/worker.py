"""
ARQ worker running queued jobs.

Run as a separate process:

    arq services.jobs.worker.WorkerSettings
"""
import logging
from typing import Any, Dict

from arq import Retry
from arq.worker import func

from core.config import settings
from core.logging_config import setup_logging
from services.jobs.cancellation_mail import CancellationMail, log_delivery
from services.jobs.queue import get_redis_settings

logger = logging.getLogger(__name__)


async def cancellation_mail_task(ctx: Dict[str, Any], payload: Dict[str, Any]) -> None:
    """
    Deliver the cancellation mail for one canceled appointment.

    Args:
        ctx: ARQ context, holding ``cancellation_mail`` and ``job_try``
        payload: CancellationJobPayload as JSON-compatible dict

    Raises:
        Retry: While attempts remain, so ARQ runs the job again later
    """
    job_try = ctx.get("job_try", 1)
    max_attempts = ctx.get("max_attempts", settings.job_max_attempts)
    log_extra = {"job_key": CancellationMail.key, "job_id": ctx.get("job_id")}

    try:
        await ctx["cancellation_mail"].handle(payload)
    except Exception as e:
        if job_try < max_attempts:
            logger.warning(
                f"Job failed (attempt {job_try}/{max_attempts}), retrying: {e}",
                extra=log_extra,
            )
            raise Retry(defer=job_try * settings.job_retry_delay_seconds) from e
        logger.error(
            f"Job failed after {max_attempts} attempts: {e}",
            extra=log_extra,
            exc_info=True,
        )
        raise


async def startup(ctx: Dict[str, Any]) -> None:
    setup_logging()
    ctx["cancellation_mail"] = CancellationMail(deliver=log_delivery)
    ctx["max_attempts"] = settings.job_max_attempts
    logger.info("Job worker started")


async def shutdown(ctx: Dict[str, Any]) -> None:
    logger.info("Job worker stopped")


class WorkerSettings:
    """ARQ worker settings"""

    functions = [
        func(cancellation_mail_task, name=CancellationMail.key, max_tries=settings.job_max_attempts),
    ]
    redis_settings = get_redis_settings()
    queue_name = settings.job_queue_name
    on_startup = startup
    on_shutdown = shutdown

    max_tries = settings.job_max_attempts
    poll_delay = settings.job_poll_interval_seconds
    # Failed jobs stay readable as ARQ results until this expires
    keep_result = settings.job_keep_result_seconds
