"""Appointment-related messages."""
from dataclasses import dataclass


@dataclass(frozen=True)
class AppointmentMessages:
    """Messages for appointment notifications."""

    CANCELLATION_SUBJECT = "Appointment canceled"
    UNKNOWN_CUSTOMER = "a customer"

    @staticmethod
    def new_booking(customer_name: str, date_str: str) -> str:
        """Provider notification for a new booking."""
        return f"New appointment from {customer_name} for {date_str}"

    @staticmethod
    def cancellation_mail(provider_name: str, customer_name: str, date_str: str) -> str:
        """Body of the mail sent to the provider after a cancellation."""
        return (
            f"Hello, {provider_name}.\n\n"
            f"You have a new cancellation.\n\n"
            f"Customer: {customer_name}\n"
            f"Date: {date_str}\n\n"
            f"The appointment was canceled and the slot is free again."
        )
