"""Cancellation mail job: tells the provider an appointment was canceled."""
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict

from core.config import settings
from core.dto import CancellationJobPayload
from core.messages import AppointmentMessages
from core.time_utils import format_slot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MailMessage:
    to: str
    subject: str
    text: str


MailDelivery = Callable[[MailMessage], Awaitable[None]]


class CancellationMail:
    """Renders the cancellation mail and hands it to the mail transport."""

    key = "CancellationMail"

    def __init__(self, deliver: MailDelivery, timezone_str: str | None = None):
        self.deliver = deliver
        self.timezone_str = timezone_str or settings.timezone

    def build_message(self, payload: CancellationJobPayload) -> MailMessage:
        date_str = format_slot(payload.appointment.scheduled_at, self.timezone_str)
        return MailMessage(
            to=f"{payload.provider.name} <{payload.provider.email}>",
            subject=AppointmentMessages.CANCELLATION_SUBJECT,
            text=AppointmentMessages.cancellation_mail(
                payload.provider.name,
                payload.customer.name,
                date_str,
            ),
        )

    async def handle(self, data: Dict[str, Any]) -> None:
        payload = CancellationJobPayload.model_validate(data)
        await self.deliver(self.build_message(payload))
        logger.info(
            "Cancellation mail delivered",
            extra={"appointment_id": payload.appointment.id, "job_key": self.key},
        )


async def log_delivery(message: MailMessage) -> None:
    """Mail transport used when no real one is configured."""
    logger.info(f"Mail to {message.to}: {message.subject}\n{message.text}")
