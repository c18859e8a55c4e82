"""Tests for the error taxonomy and its status mapping."""
from datetime import datetime, timezone

from core.exceptions import (
    AlreadyCanceledError,
    AppointmentNotFoundError,
    ForbiddenError,
    NotAProviderError,
    PastDateError,
    SelfBookingError,
    SlotbookError,
    SlotConflictError,
    StorageUnavailableError,
    TooLateError,
)

SLOT = datetime(2024, 6, 1, 14, tzinfo=timezone.utc)


def test_status_mapping():
    assert SelfBookingError(1).status_code == 401
    assert NotAProviderError(2).status_code == 401
    assert PastDateError(SLOT).status_code == 400
    assert SlotConflictError(2, SLOT).status_code == 400
    assert ForbiddenError(5, 1).status_code == 401
    assert TooLateError(5, SLOT).status_code == 401
    assert AppointmentNotFoundError(5).status_code == 404
    assert AlreadyCanceledError(5).status_code == 400
    assert StorageUnavailableError().status_code == 503


def test_errors_carry_context():
    error = SlotConflictError(2, SLOT)
    assert isinstance(error, SlotbookError)
    assert error.details == {"provider_id": 2, "slot": "2024-06-01T14:00:00+00:00"}
    assert str(error) == "Appointment date is not available"

    assert str(AppointmentNotFoundError(9)) == "Appointment #9 not found"
    assert str(AppointmentNotFoundError()) == "Appointment not found"
