"""Appointment DTOs for request parsing and read models."""
from datetime import datetime, timezone
from typing import Any, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError, field_validator
from pytz import timezone as pytz_timezone

from core.config import settings
from core.exceptions import ValidationError

DTOType = TypeVar("DTOType", bound=BaseModel)


def parse_input(dto_class: Type[DTOType], data: dict[str, Any]) -> DTOType:
    """
    Validate raw request data into a DTO.

    Raises:
        ValidationError: With the first offending field
    """
    try:
        return dto_class.model_validate(data)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "body"
        raise ValidationError(field, first["msg"]) from e


class BookAppointmentDTO(BaseModel):
    """DTO for booking an appointment."""

    provider_id: int = Field(..., gt=0, description="Provider user ID")
    date: datetime = Field(..., description="Requested start (normalized to the hour on booking)")

    @field_validator('date')
    @classmethod
    def validate_date(cls, v: datetime) -> datetime:
        """Interpret naive input in the configured timezone and convert to UTC."""
        if v.tzinfo is None:
            v = pytz_timezone(settings.timezone).localize(v)
        return v.astimezone(timezone.utc)


class CancelAppointmentDTO(BaseModel):
    """DTO for cancelling an appointment."""

    appointment_id: int = Field(..., gt=0, description="Appointment ID")


class ListAppointmentsDTO(BaseModel):
    """DTO for the customer appointment listing."""

    page: int = Field(1, ge=1, description="1-based page number")


class AvatarView(BaseModel):
    """Provider avatar projection."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    url: str
    path: str


class ProviderView(BaseModel):
    """Provider projection."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    avatar: Optional[AvatarView] = None


class AppointmentView(BaseModel):
    """Listing row for a customer's appointment."""

    id: int
    date: datetime
    past: bool
    cancelable: bool
    provider: ProviderView
