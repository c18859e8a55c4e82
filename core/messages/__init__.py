"""
Messages package for centralized text management.

- appointments.py: Booking notification and cancellation mail texts
"""

from core.messages.appointments import AppointmentMessages

__all__ = [
    'AppointmentMessages',
]
