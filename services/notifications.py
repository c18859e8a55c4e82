"""Provider notifications written synchronously on booking."""
from __future__ import annotations
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.exceptions import NotificationDispatchError
from core.messages import AppointmentMessages
from core.time_utils import format_slot
from database.models import Appointment, Notification
from database.repositories import NotificationRepository, UserRepository

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Writes the in-app notice a provider gets for every new booking."""

    def __init__(self, timezone_str: str | None = None):
        self.timezone_str = timezone_str or settings.timezone

    def render_new_booking(self, customer_name: str, appointment: Appointment) -> str:
        date_str = format_slot(appointment.scheduled_at, self.timezone_str)
        return AppointmentMessages.new_booking(customer_name, date_str)

    async def notify_new_booking(self, session: AsyncSession, appointment: Appointment) -> Notification:
        """
        Create the provider's notification for a booked appointment.

        Args:
            session: Database session
            appointment: The persisted appointment

        Returns:
            Created Notification

        Raises:
            NotificationDispatchError: If the notification could not be written
        """
        appointment_id = appointment.id
        provider_id = appointment.provider_id
        try:
            customer = await UserRepository(session).get_by_id(appointment.customer_id)
            customer_name = customer.name if customer else AppointmentMessages.UNKNOWN_CUSTOMER

            notification = await NotificationRepository(session).create(
                recipient_id=provider_id,
                content=self.render_new_booking(customer_name, appointment),
            )
        except SQLAlchemyError as e:
            raise NotificationDispatchError(appointment_id, reason=str(e)[:200]) from e

        logger.debug(
            "Provider notified of new appointment",
            extra={"appointment_id": appointment_id, "provider_id": provider_id},
        )
        return notification
