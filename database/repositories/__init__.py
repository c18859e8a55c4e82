"""Database repositories package."""
from database.repositories.user import UserRepository
from database.repositories.appointment import AppointmentRepository
from database.repositories.notification import NotificationRepository

__all__ = [
    "UserRepository",
    "AppointmentRepository",
    "NotificationRepository",
]
