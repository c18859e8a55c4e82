"""
Scheduling engine: booking and cancellation rules.

Appointments move from active (``canceled_at`` unset) to canceled, never
back. Each operation runs in its own session; the engine itself holds no
mutable state and is built once per process.
"""
import logging
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.clock import Clock, SystemClock
from core.config import settings
from core.dto import AppointmentView, CancellationJobPayload, ProviderView
from core.exceptions import (
    AlreadyCanceledError,
    AppointmentNotFoundError,
    ForbiddenError,
    NotAProviderError,
    NotificationDispatchError,
    PastDateError,
    SelfBookingError,
    SlotConflictError,
    TooLateError,
)
from database.models import Appointment
from database.repositories import AppointmentRepository, UserRepository
from database.repositories.base import translate_storage_errors
from services.jobs.cancellation_mail import CancellationMail
from services.jobs.queue import JobQueue
from services.notifications import NotificationDispatcher

logger = logging.getLogger(__name__)


class SchedulingEngine:
    """Books and cancels appointments."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        job_queue: JobQueue,
        notifications: Optional[NotificationDispatcher] = None,
        clock: Optional[Clock] = None,
        lead_time: Optional[timedelta] = None,
        page_size: Optional[int] = None,
    ):
        self.session_factory = session_factory
        self.job_queue = job_queue
        self.notifications = notifications or NotificationDispatcher()
        self.clock = clock or SystemClock()
        if lead_time is None:
            lead_time = timedelta(hours=settings.cancellation_lead_hours)
        self.lead_time = lead_time
        self.page_size = settings.appointments_page_size if page_size is None else page_size

    async def list_appointments(self, customer_id: int, page: int = 1) -> List[AppointmentView]:
        """
        Active appointments of a customer, soonest first.

        Args:
            customer_id: Acting customer
            page: 1-based page number

        Returns:
            One page of AppointmentView rows
        """
        async with translate_storage_errors("list appointments"):
            async with self.session_factory() as session:
                apps = await AppointmentRepository(session).list_active_for_customer(
                    customer_id, page=page, page_size=self.page_size
                )

        now = self.clock.now()
        return [
            AppointmentView(
                id=a.id,
                date=a.scheduled_at,
                past=a.is_past(now),
                cancelable=a.is_cancelable(now, self.lead_time),
                provider=ProviderView.model_validate(a.provider),
            )
            for a in apps
        ]

    async def book(self, customer_id: int, provider_id: int, requested_at: datetime) -> Appointment:
        """
        Book the hour slot containing ``requested_at`` with a provider.

        Args:
            customer_id: Acting customer
            provider_id: User to book with
            requested_at: Any instant inside the wanted hour

        Returns:
            The persisted, active Appointment

        Raises:
            SelfBookingError: If customer and provider are the same user
            NotAProviderError: If provider_id has no provider capability
            PastDateError: If the slot starts before now
            SlotConflictError: If the provider already has an active appointment in the slot
            StorageUnavailableError: If the database fails
        """
        log_extra = {"customer_id": customer_id, "provider_id": provider_id}

        if provider_id == customer_id:
            raise SelfBookingError(customer_id)

        async with translate_storage_errors("book appointment"):
            async with self.session_factory() as session:
                users = UserRepository(session)
                ledger = AppointmentRepository(session)

                if await users.get_provider(provider_id) is None:
                    raise NotAProviderError(provider_id)

                slot = self.clock.normalize_to_hour_start(requested_at)
                if slot < self.clock.now():
                    raise PastDateError(slot)

                if await ledger.is_slot_taken(provider_id, slot):
                    raise SlotConflictError(provider_id, slot)

                appointment = await ledger.record(
                    Appointment(
                        customer_id=customer_id,
                        provider_id=provider_id,
                        scheduled_at=slot,
                        canceled_at=None,
                    )
                )
                await session.commit()
                log_extra["appointment_id"] = appointment.id
                logger.info(f"Appointment booked for {slot.isoformat()}", extra=log_extra)

        await self._notify_provider(appointment)
        return appointment

    async def cancel(self, customer_id: int, appointment_id: int) -> Appointment:
        """
        Cancel an appointment owned by the acting customer.

        Args:
            customer_id: Acting customer
            appointment_id: Appointment to cancel

        Returns:
            The canceled Appointment

        Raises:
            AppointmentNotFoundError: If the appointment does not exist
            ForbiddenError: If the appointment belongs to another customer
            TooLateError: If now is within the lead time before the slot
            AlreadyCanceledError: If the appointment was canceled before
            StorageUnavailableError: If the database fails
        """
        log_extra = {"customer_id": customer_id, "appointment_id": appointment_id}

        async with translate_storage_errors("cancel appointment"):
            async with self.session_factory() as session:
                ledger = AppointmentRepository(session)

                appointment = await ledger.get_by_id(appointment_id, with_relations=True)
                if appointment is None:
                    raise AppointmentNotFoundError(appointment_id)

                if appointment.customer_id != customer_id:
                    raise ForbiddenError(appointment_id, customer_id)

                now = self.clock.now()
                deadline = appointment.cancellation_deadline(self.lead_time)
                if now >= deadline:
                    raise TooLateError(
                        appointment_id,
                        deadline,
                        lead_hours=self.lead_time.total_seconds() / 3600,
                    )

                if not appointment.is_active:
                    raise AlreadyCanceledError(appointment_id)

                appointment = await ledger.mark_canceled(appointment_id, now)
                await session.commit()
                logger.info("Appointment canceled", extra=log_extra)

        await self._enqueue_cancellation(appointment)
        return appointment

    async def _notify_provider(self, appointment: Appointment) -> None:
        """The booking is already committed; a failure here is only reported.

        The notice is written in its own session so a failed write cannot
        expire or roll back the booked instance.
        """
        log_extra = {"appointment_id": appointment.id, "provider_id": appointment.provider_id}
        try:
            async with self.session_factory() as session:
                await self.notifications.notify_new_booking(session, appointment)
                await session.commit()
        except (NotificationDispatchError, SQLAlchemyError, OSError) as e:
            logger.error(
                f"Appointment booked but provider notification failed: {e}",
                extra=log_extra,
                exc_info=True,
            )

    async def _enqueue_cancellation(self, appointment: Appointment) -> None:
        """Hand the cancellation mail to the queue without failing the cancel."""
        payload = CancellationJobPayload.from_appointment(appointment)
        try:
            job = await self.job_queue.enqueue(CancellationMail.key, payload.model_dump(mode="json"))
        except Exception as e:
            logger.error(
                f"Could not enqueue cancellation job: {e}",
                extra={"appointment_id": appointment.id, "job_key": CancellationMail.key},
                exc_info=True,
            )
            return
        logger.debug(
            "Cancellation job enqueued",
            extra={"appointment_id": appointment.id, "job_key": job.key, "job_id": job.id},
        )
