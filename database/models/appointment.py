"""Appointment model - one booked slot between a customer and a provider."""
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, ForeignKey, Index, text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from database.base import Base
from database.types import BigIntegerPK, UTCDateTime

if TYPE_CHECKING:
    from database.models.user import User


ACTIVE_CLAUSE = text("canceled_at IS NULL")


class Appointment(Base):
    """Appointment model.

    ``scheduled_at`` is always an hour start. ``canceled_at`` is set once and
    never cleared; rows are never deleted.
    """

    __tablename__ = "appointments"
    __table_args__ = (
        # One active appointment per provider and slot
        Index(
            "uq_appointments_provider_slot_active",
            "provider_id",
            "scheduled_at",
            unique=True,
            postgresql_where=ACTIVE_CLAUSE,
            sqlite_where=ACTIVE_CLAUSE,
        ),
    )

    # Primary key
    id: Mapped[int] = mapped_column(BigIntegerPK, primary_key=True, autoincrement=True)

    # Relationships
    customer_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    provider_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # Appointment details
    scheduled_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, index=True)
    canceled_at: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )

    # Relationships
    customer: Mapped["User"] = relationship("User", foreign_keys=[customer_id])
    provider: Mapped["User"] = relationship("User", foreign_keys=[provider_id])

    @property
    def is_active(self) -> bool:
        return self.canceled_at is None

    def is_past(self, now: datetime) -> bool:
        return self.scheduled_at < now

    def cancellation_deadline(self, lead_time: timedelta) -> datetime:
        """Last instant (exclusive) at which the appointment may be canceled."""
        return self.scheduled_at - lead_time

    def is_cancelable(self, now: datetime, lead_time: timedelta) -> bool:
        return self.is_active and now < self.cancellation_deadline(lead_time)

    def __repr__(self) -> str:
        return (
            f"<Appointment(id={self.id}, provider_id={self.provider_id}, "
            f"customer_id={self.customer_id}, scheduled_at={self.scheduled_at}, "
            f"canceled_at={self.canceled_at})>"
        )
