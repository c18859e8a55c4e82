"""
Custom application exceptions.

Booking and cancellation rejections are expected, reported outcomes. Each
carries the context (slot, provider, appointment) a caller needs to render a
message, plus the HTTP status the request layer is expected to map it to.
"""
from datetime import datetime
from typing import Optional


class SlotbookError(Exception):
    """Base exception for all application errors."""

    message: str = "An error occurred"
    status_code: int = 400

    def __init__(self, message: Optional[str] = None, **kwargs):
        self.message = message or self.message
        self.details = kwargs
        super().__init__(self.message)


# ============== Validation ==============

class ValidationError(SlotbookError):
    """Malformed request input."""
    message = "Validation fails"

    def __init__(self, field: str, error: str):
        self.field = field
        self.error = error
        super().__init__(f"Invalid field '{field}': {error}", field=field)


# ============== Booking ==============

class BookingError(SlotbookError):
    """Base booking rejection."""
    message = "Appointment could not be booked"


class SelfBookingError(BookingError):
    """Customer tried to book an appointment with themselves."""
    message = "You can't create an appointment with yourself"
    status_code = 401

    def __init__(self, user_id: int):
        self.user_id = user_id
        super().__init__(user_id=user_id)


class NotAProviderError(BookingError):
    """Target user has no provider capability."""
    message = "You can only create appointments with providers"
    status_code = 401

    def __init__(self, provider_id: int):
        self.provider_id = provider_id
        super().__init__(provider_id=provider_id)


class PastDateError(BookingError):
    """Requested slot starts before the current time."""
    message = "Past dates are not permitted"

    def __init__(self, slot: datetime):
        self.slot = slot
        super().__init__(slot=slot.isoformat())


class SlotConflictError(BookingError):
    """Provider already has an active appointment in the slot."""
    message = "Appointment date is not available"

    def __init__(self, provider_id: int, slot: datetime):
        self.provider_id = provider_id
        self.slot = slot
        super().__init__(provider_id=provider_id, slot=slot.isoformat())


# ============== Cancellation ==============

class AppointmentError(SlotbookError):
    """Base appointment error."""
    message = "Appointment error"


class AppointmentNotFoundError(AppointmentError):
    """Appointment not found."""
    message = "Appointment not found"
    status_code = 404

    def __init__(self, appointment_id: Optional[int] = None):
        self.appointment_id = appointment_id
        super().__init__(
            f"Appointment #{appointment_id} not found" if appointment_id else None,
            appointment_id=appointment_id,
        )


class ForbiddenError(AppointmentError):
    """Acting customer does not own the appointment."""
    message = "You don't have permission to cancel this appointment"
    status_code = 401

    def __init__(self, appointment_id: int, user_id: int):
        self.appointment_id = appointment_id
        self.user_id = user_id
        super().__init__(appointment_id=appointment_id, user_id=user_id)


class TooLateError(AppointmentError):
    """Cancellation deadline has passed."""
    status_code = 401

    def __init__(self, appointment_id: int, deadline: datetime, lead_hours: float = 2):
        self.appointment_id = appointment_id
        self.deadline = deadline
        super().__init__(
            f"You can only cancel appointments {lead_hours:g} hours in advance.",
            appointment_id=appointment_id,
            deadline=deadline.isoformat(),
        )


class AlreadyCanceledError(AppointmentError):
    """Appointment is already canceled."""
    message = "Appointment is already canceled"

    def __init__(self, appointment_id: int):
        self.appointment_id = appointment_id
        super().__init__(appointment_id=appointment_id)


# ============== Side effects & infrastructure ==============

class NotificationDispatchError(SlotbookError):
    """Provider notification could not be written. The booking stands."""
    message = "Provider notification failed"
    status_code = 500

    def __init__(self, appointment_id: int, reason: Optional[str] = None):
        self.appointment_id = appointment_id
        self.reason = reason
        super().__init__(
            f"Provider notification failed: {reason}" if reason else None,
            appointment_id=appointment_id,
        )


class StorageUnavailableError(SlotbookError):
    """Appointment storage is unreachable or failed mid-operation."""
    message = "Storage temporarily unavailable"
    status_code = 503
