"""
Data Transfer Objects (DTOs) for data validation.

This package contains Pydantic models for validating input data and
shaping read models and job payloads.
"""

from core.dto.appointments import (
    parse_input,
    BookAppointmentDTO,
    CancelAppointmentDTO,
    ListAppointmentsDTO,
    AvatarView,
    ProviderView,
    AppointmentView,
)
from core.dto.jobs import (
    AppointmentSnapshot,
    ProviderContact,
    CustomerContact,
    CancellationJobPayload,
)

__all__ = [
    'parse_input',
    'BookAppointmentDTO',
    'CancelAppointmentDTO',
    'ListAppointmentsDTO',
    'AvatarView',
    'ProviderView',
    'AppointmentView',
    'AppointmentSnapshot',
    'ProviderContact',
    'CustomerContact',
    'CancellationJobPayload',
]
