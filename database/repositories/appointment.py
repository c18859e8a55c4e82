"""Appointment repository - the slot ledger."""
from typing import Optional, List
from datetime import datetime

from sqlalchemy import select, update, and_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from core.exceptions import AlreadyCanceledError, AppointmentNotFoundError, SlotConflictError
from database.models import Appointment, User

SLOT_INDEX = "uq_appointments_provider_slot_active"


def _is_slot_violation(error: IntegrityError) -> bool:
    """PostgreSQL names the index, SQLite names the columns."""
    message = str(error.orig)
    return SLOT_INDEX in message or "appointments.provider_id, appointments.scheduled_at" in message


class AppointmentRepository:
    """Repository for Appointment model operations.

    The partial unique index on (provider_id, scheduled_at) among active rows
    is the authority on slot ownership; ``is_slot_taken`` is only the fast path.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(
        self,
        appointment_id: int,
        with_relations: bool = False
    ) -> Optional[Appointment]:
        """Get appointment by ID."""
        query = select(Appointment).where(Appointment.id == appointment_id)

        if with_relations:
            query = query.options(
                selectinload(Appointment.provider),
                selectinload(Appointment.customer),
            )

        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def is_slot_taken(self, provider_id: int, slot: datetime) -> bool:
        """Check if the provider has an active appointment at exactly this slot."""
        query = select(Appointment.id).where(
            and_(
                Appointment.provider_id == provider_id,
                Appointment.scheduled_at == slot,
                Appointment.canceled_at.is_(None),
            )
        ).limit(1)

        result = await self.session.execute(query)
        return result.first() is not None

    async def record(self, appointment: Appointment) -> Appointment:
        """
        Persist a new appointment.

        Raises:
            SlotConflictError: If another active appointment took the slot
                between the availability check and this insert
        """
        self.session.add(appointment)
        try:
            await self.session.flush()
        except IntegrityError as e:
            await self.session.rollback()
            if not _is_slot_violation(e):
                raise
            raise SlotConflictError(appointment.provider_id, appointment.scheduled_at) from e
        return appointment

    async def mark_canceled(self, appointment_id: int, canceled_at: datetime) -> Appointment:
        """
        Set canceled_at if, and only if, it is still unset.

        Raises:
            AlreadyCanceledError: If the appointment was canceled already
            AppointmentNotFoundError: If the appointment does not exist
        """
        result = await self.session.execute(
            update(Appointment)
            .where(
                and_(
                    Appointment.id == appointment_id,
                    Appointment.canceled_at.is_(None),
                )
            )
            .values(canceled_at=canceled_at)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            if await self.get_by_id(appointment_id) is None:
                raise AppointmentNotFoundError(appointment_id)
            raise AlreadyCanceledError(appointment_id)

        refreshed = await self.session.execute(
            select(Appointment)
            .where(Appointment.id == appointment_id)
            .options(
                selectinload(Appointment.provider),
                selectinload(Appointment.customer),
            )
            .execution_options(populate_existing=True)
        )
        return refreshed.scalar_one()

    async def list_active_for_customer(
        self,
        customer_id: int,
        page: int = 1,
        page_size: int = 20,
    ) -> List[Appointment]:
        """Active appointments of a customer, soonest first, with provider and avatar."""
        query = (
            select(Appointment)
            .where(
                and_(
                    Appointment.customer_id == customer_id,
                    Appointment.canceled_at.is_(None),
                )
            )
            .order_by(Appointment.scheduled_at, Appointment.id)
            .limit(page_size)
            .offset((page - 1) * page_size)
            .options(selectinload(Appointment.provider).selectinload(User.avatar))
        )

        result = await self.session.execute(query)
        return list(result.scalars().all())
