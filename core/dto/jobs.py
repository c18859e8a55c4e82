"""Payloads carried by queued jobs."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class AppointmentSnapshot(BaseModel):
    """Appointment state at the moment the job was enqueued."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    customer_id: int
    provider_id: int
    scheduled_at: datetime
    canceled_at: Optional[datetime] = None


class ProviderContact(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    email: str


class CustomerContact(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str


class CancellationJobPayload(BaseModel):
    """Everything the cancellation mail needs to render recipient and message."""

    appointment: AppointmentSnapshot
    provider: ProviderContact
    customer: CustomerContact

    @classmethod
    def from_appointment(cls, appointment) -> "CancellationJobPayload":
        """Build from an Appointment with provider and customer loaded."""
        return cls(
            appointment=AppointmentSnapshot.model_validate(appointment),
            provider=ProviderContact.model_validate(appointment.provider),
            customer=CustomerContact.model_validate(appointment.customer),
        )
